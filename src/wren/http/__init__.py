"""HTTP primitives: immutable Request, Headers, QueryParams, and Response."""

from wren.http.headers import Headers, QueryParams
from wren.http.request import Request
from wren.http.response import Response

__all__ = ["Headers", "QueryParams", "Request", "Response"]

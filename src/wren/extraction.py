"""Typed binding of decoded request bodies into dataclasses.

Used by ``Context.bind(cls)``. Each dataclass field is looked up by name
in the decoded body and converted to the field's annotated type.

Supported field types: ``str``, ``int``, ``float``, ``bool``. Missing
keys use the dataclass field default. A value that fails conversion is
passed through unchanged.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Mapping
from typing import Any

from wren.errors import HTTPError


def extract_dataclass[T](cls: type[T], data: Mapping[str, Any]) -> T:
    """Create a dataclass instance from a mapping (form or JSON object).

    Raises ``TypeError`` if *cls* is not a dataclass, and
    ``HTTPError(400)`` if a required field is missing from *data*.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        msg = f"bind target must be a dataclass type, got {cls!r}"
        raise TypeError(msg)

    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.name not in data:
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise HTTPError(400, f"missing field {f.name!r}")
            continue
        kwargs[f.name] = _convert(data[f.name], hints.get(f.name, Any))

    return cls(**kwargs)


def _convert(value: Any, target_type: Any) -> Any:
    """Convert *value* to *target_type*, returning *value* unchanged on failure."""
    if target_type is str:
        return value.strip() if isinstance(value, str) else str(value)

    if target_type in (int, float):
        if isinstance(value, bool):
            return value
        try:
            return target_type(value)
        except (ValueError, TypeError):
            return value

    if target_type is bool:
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value)

    return value

"""Path pattern compilation.

A pattern is literal text plus ``:name`` parameter tokens::

    /users/:id/posts/:postId

Each parameter accepts one or more characters other than ``/``. Every
other character, including regex metacharacters such as ``.`` or ``+``,
matches itself exactly. Matching is anchored at both ends of the path.

Captured values are returned as they appear in the path handed to
``PathMatcher.match``. The matcher never URL-decodes; under ASGI the
server has already percent-decoded ``scope["path"]``, and any further
decoding is the caller's concern.
"""

import re
from dataclasses import dataclass

from wren.errors import InvalidPatternError

# A parameter token: ':' followed by an identifier not starting with a digit
PARAM_TOKEN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")

# What a single parameter slot accepts
PARAM_VALUE = r"[^/]+"


@dataclass(frozen=True, slots=True)
class PathMatcher:
    """A compiled path pattern.

    Built once at registration time by ``compile_pattern`` and owned by a
    single ``Route``; never rebuilt per request.
    """

    pattern: str
    param_names: tuple[str, ...]
    regex: re.Pattern[str]

    def match(self, path: str) -> dict[str, str] | None:
        """Return the captured parameters, or ``None`` if *path* doesn't match.

        The returned keys are exactly ``param_names``.
        """
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return m.groupdict()


def compile_pattern(pattern: str) -> PathMatcher:
    """Compile *pattern* into a ``PathMatcher``.

    Raises ``InvalidPatternError`` if the pattern is empty, does not start
    with ``/``, or names the same parameter twice.

    Examples::

        compile_pattern("/users/:id").match("/users/42")   -> {"id": "42"}
        compile_pattern("/users/:id").match("/users/")     -> None
        compile_pattern("/a.b").match("/aXb")              -> None
    """
    if not pattern:
        raise InvalidPatternError(pattern, "pattern is empty")
    if not pattern.startswith("/"):
        raise InvalidPatternError(pattern, "pattern must start with '/'")

    parts: list[str] = []
    names: list[str] = []
    pos = 0
    for token in PARAM_TOKEN.finditer(pattern):
        name = token.group(1)
        if name in names:
            raise InvalidPatternError(pattern, f"parameter {name!r} appears more than once")
        names.append(name)
        parts.append(re.escape(pattern[pos : token.start()]))
        parts.append(f"(?P<{name}>{PARAM_VALUE})")
        pos = token.end()
    parts.append(re.escape(pattern[pos:]))

    try:
        regex = re.compile("".join(parts))
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc

    return PathMatcher(pattern=pattern, param_names=tuple(names), regex=regex)

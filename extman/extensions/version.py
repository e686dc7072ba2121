"""Version matching for extension dependencies.

Ranges follow the npm flavour most extension authors already know::

    1.2.3            exact (1.2 == 1.2.0)
    >=1.0 <2.0       comparators, space separated ones are AND-ed
    ^1.2.3           compatible upgrades, >=1.2.3 <2.0.0
    ~1.2.3           patch upgrades, >=1.2.3 <1.3.0
    1.x  1.2.*  *    wildcards
    1.0 - 2.0        hyphen range, a partial upper bound covers its patches
    ^1.0 || ^2.0     alternatives

Versions themselves are parsed by ``packaging`` and may carry a leading
``v``. Build metadata (``1.2.3+build``) is ignored when comparing.
"""

import operator
import re
from typing import Callable, NamedTuple

from packaging.version import InvalidVersion, Version

from extman.core.errors import VersionFormatError


_TOKEN = re.compile(r"(?P<op>\^|~=|~|>=|<=|>|<|==|=|!=)?(?P<version>.+)")
_OPERATOR_SPACE = re.compile(r"(\^|~=|~|>=|<=|>|<|==|=|!=)\s+")
_HYPHEN = re.compile(r"(?P<low>\S+)\s+-\s+(?P<high>\S+)")
_WILDCARDS = {"*", "x", "X"}

_COMPARE: dict[str, Callable[[Version, Version], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}


class Constraint(NamedTuple):
    """A single ``installed <op> bound`` test."""
    op: str
    bound: Version

    def allows(self, version: Version) -> bool:
        return _COMPARE[self.op](version, self.bound)


def parse_version(value: str) -> Version:
    """Parse a version string, raising VersionFormatError when malformed."""
    if not isinstance(value, str):
        raise VersionFormatError("Version must be a string", value=repr(value))
    try:
        return Version(Version(value.strip()).public)
    except InvalidVersion as e:
        raise VersionFormatError(f"Invalid version: {value!r}", value=value, cause=e) from e


def _upper_bound(release: tuple[int, ...], index: int) -> Version:
    # .dev0 keeps pre-releases of the bound itself out of the range
    bumped = release[:index] + (release[index] + 1,)
    return Version(".".join(str(part) for part in bumped) + ".dev0")


def _wildcard(op: str | None, text: str, token: str) -> tuple[Constraint, ...]:
    if op not in (None, "=", "=="):
        raise VersionFormatError("Wildcards cannot be combined with an operator", value=token)

    parts = text.split(".")
    given = []
    for i, part in enumerate(parts):
        if part in _WILDCARDS:
            if any(rest not in _WILDCARDS for rest in parts[i:]):
                raise VersionFormatError("Wildcards must come last", value=token)
            break
        if not part.isdigit():
            raise VersionFormatError(f"Invalid version range: {token!r}", value=token)
        given.append(int(part))

    if not given:
        return ()
    release = tuple(given)
    lower = Version(".".join(str(p) for p in release))
    return (Constraint(">=", lower), Constraint("<", _upper_bound(release, len(release) - 1)))


def _parse_token(token: str) -> tuple[Constraint, ...]:
    match = _TOKEN.fullmatch(token)
    if match is None:
        raise VersionFormatError(f"Invalid version range: {token!r}", value=token)

    op = match.group("op")
    text = match.group("version")
    bare = text[1:] if text[:1] in ("v", "V") else text
    if any(part in _WILDCARDS for part in bare.split(".")):
        return _wildcard(op, bare, token)

    version = parse_version(text)
    release = version.release

    if op == "^":
        index = next((i for i, part in enumerate(release) if part != 0), len(release) - 1)
        return (Constraint(">=", version), Constraint("<", _upper_bound(release, index)))

    if op in ("~", "~="):
        index = 0 if len(release) == 1 else 1
        return (Constraint(">=", version), Constraint("<", _upper_bound(release, index)))

    if op in (None, "="):
        op = "=="
    return (Constraint(op, version),)


def _parse_alternative(text: str) -> tuple[Constraint, ...]:
    text = text.strip()
    if not text:
        return ()

    hyphen = _HYPHEN.fullmatch(text)
    if hyphen:
        low = parse_version(hyphen.group("low"))
        high = parse_version(hyphen.group("high"))
        if len(high.release) < 3:
            return (Constraint(">=", low), Constraint("<", _upper_bound(high.release, len(high.release) - 1)))
        return (Constraint(">=", low), Constraint("<=", high))

    constraints: list[Constraint] = []
    for token in _OPERATOR_SPACE.sub(r"\1", text).split():
        constraints.extend(_parse_token(token))
    return tuple(constraints)


def parse_range(required: str) -> tuple[tuple[Constraint, ...], ...]:
    """Parse a range expression into OR-ed groups of AND-ed constraints.

    An empty group accepts any version.
    """
    if not isinstance(required, str):
        raise VersionFormatError("Version range must be a string", value=repr(required))
    return tuple(_parse_alternative(alternative) for alternative in required.split("||"))


def matches(installed: str, required: str) -> bool:
    """Check whether ``installed`` satisfies the range ``required``.

    Both strings are parsed fully before anything is compared, so a
    malformed range fails even when an earlier alternative would match.

    Raises:
        VersionFormatError: If either string is malformed.
    """
    version = parse_version(installed)
    alternatives = parse_range(required)
    return any(
        all(constraint.allows(version) for constraint in group)
        for group in alternatives
    )

"""Semantic version parsing and equivalence.

Chart versions follow SemVer, including prerelease tags such as
``1.3.1-up.1`` that PEP 440 parsers reject. Parsing is lenient in the same
places Helm is: a leading ``v`` is accepted and missing minor or patch
components default to zero.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from up_cli.services.uxp.exceptions import InvalidVersionError

_IDENT = r"[0-9A-Za-z-]+"
_VERSION_RE = re.compile(
    rf"""
    ^v?
    (?P<major>0|[1-9]\d*)
    (?:\.(?P<minor>0|[1-9]\d*))?
    (?:\.(?P<patch>0|[1-9]\d*))?
    (?:-(?P<prerelease>{_IDENT}(?:\.{_IDENT})*))?
    (?:\+(?P<metadata>{_IDENT}(?:\.{_IDENT})*))?
    $
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Version:
    """A parsed semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: str = ""
    metadata: str = ""

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a version string.

        Raises:
            InvalidVersionError: If ``value`` is not a semantic version.
        """
        match = _VERSION_RE.match(value.strip()) if value else None
        if match is None:
            raise InvalidVersionError(value)
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor") or 0),
            patch=int(match.group("patch") or 0),
            prerelease=match.group("prerelease") or "",
            metadata=match.group("metadata") or "",
        )

    @property
    def core(self) -> tuple[int, int, int]:
        """The (major, minor, patch) triple."""
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text


def parse(value: str) -> Version:
    """Parse ``value`` into a :class:`Version`."""
    return Version.parse(value)


def equivalent(current: str, target: str) -> bool:
    """Report whether two versions share major, minor and patch.

    Prerelease and build metadata are ignored, so ``1.3.1`` and
    ``1.3.1-up.1`` are equivalent. An unparsable version on either side is
    never equivalent to anything.
    """
    try:
        return Version.parse(current).core == Version.parse(target).core
    except InvalidVersionError:
        return False

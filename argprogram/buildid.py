"""
Build identifiers.

A build identifier is a semantic version optionally followed by the number of
commits since that version and the revision of the build, as printed by
`git describe --tags`:

    v1.2.3            stable release
    v1.2.3-17-f1d2d2f 17 commits after v1.2.3, at revision f1d2d2f

Grammar
- major, minor and patch are non-negative integers without leading zeros;
- the commit count is a positive integer;
- the revision is one or more lowercase alphanumerics.

Ordering compares (major, minor, patch, commit count or 0), so a stable release
sorts before (or equal to) any development build of the same version.
"""
import re
from typing import NamedTuple

_DIGITS = r"(0|[1-9][0-9]*)"
_PATTERN = re.compile(rf"v{_DIGITS}\.{_DIGITS}\.{_DIGITS}(?:-([1-9][0-9]*)-([a-z0-9]+))?")


class BuildId(NamedTuple):
    major: int
    minor: int
    patch: int
    commits: int | None = None
    revision: str | None = None

    @classmethod
    def parse(cls, text, /):
        """
        Parse a build identifier such as "v1.2.3" or "v1.2.3-17-f1d2d2f".

        Raises
        - TypeError when text is not a string.
        - ValueError("invalid format") when text does not follow the grammar.
        """
        if not isinstance(text, str):
            raise TypeError("BuildId.parse() argument must be a string")
        if not (match := _PATTERN.fullmatch(text)):
            raise ValueError("invalid format")
        major, minor, patch, commits, revision = match.groups()
        return cls(int(major), int(minor), int(patch), None if commits is None else int(commits), revision)

    @property
    def stable(self):
        return self.commits is None and self.revision is None

    def _key(self):
        return self.major, self.minor, self.patch, self.commits or 0

    def __str__(self):
        text = f"v{self.major}.{self.minor}.{self.patch}"
        if not self.stable:
            text += f"-{self.commits}-{self.revision}"
        return text

    # Ordering ignores the revision; equality does not (tuple equality).
    def __lt__(self, other):
        if not isinstance(other, BuildId):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other):
        if not isinstance(other, BuildId):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other):
        if not isinstance(other, BuildId):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other):
        if not isinstance(other, BuildId):
            return NotImplemented
        return self._key() >= other._key()


__all__ = (
    "BuildId",
)

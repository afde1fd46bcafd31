"""
Kernel release versions.

Only plain ``major.minor.patch`` triples are accepted; release candidates and
distribution suffixes are rejected by the parser.
"""

from __future__ import annotations

from dataclasses import dataclass

from kernel_updater.errors import VersionFormatError, VersionIntegerError


@dataclass(frozen=True, order=True)
class Version:
    """A kernel version, ordered by major, then minor, then patch."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``"M.N.P"``, allowing whitespace around each component.

        Components are validated before the component count, so ``""`` and
        ``"6..3"`` are integer errors while ``"6.15"`` is a format error.

        Raises:
            VersionIntegerError: a component is not a non-negative integer
            VersionFormatError: the text does not split into exactly three parts
        """
        numbers: list[int] = []
        for part in text.split("."):
            component = part.strip()
            # int() would also accept "+3", "1_0" and non-ASCII digits
            if not (component.isascii() and component.isdigit()):
                raise VersionIntegerError(text, component)
            numbers.append(int(component))

        if len(numbers) != 3:
            raise VersionFormatError(text)

        return cls(*numbers)

    @property
    def short(self) -> str:
        return f"{self.major}.{self.minor}"

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

"""
Core types for dexclc (PUBLIC).

This module defines the fundamental data structures used throughout the package:
- InsertMode: Strict vs. deferred validation of library paths
- LibraryEntry: A library name with its build and install paths
- Tier: The unconditional context or an SDK-version-gated context
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

ANY_LABEL = "any"


class InsertMode(str, Enum):
    """How missing paths are treated when a library is inserted."""

    STRICT = "strict"  # fail now
    DEFERRED = "deferred"  # fail when a tier actually uses the library


@dataclass(frozen=True)
class LibraryEntry:
    """
    A ``<uses-library>`` dependency and its resolved paths.

    Attributes:
        name: Library name as declared in the manifest.
        build_path: Path to the library jar on the build host, or None if unknown.
        install_path: On-device path of the installed jar, or None if unknown.
    """

    name: str
    build_path: str | None = None
    install_path: str | None = None

    @property
    def is_resolved(self) -> bool:
        """True if both paths are known."""
        return self.build_path is not None and self.install_path is not None


@total_ordering
@dataclass(frozen=True)
class Tier:
    """
    A class loader context tier.

    ``Tier(None)`` is the unconditional tier; ``Tier(29)`` is the context that
    only applies to apps targeting SDK versions below 29. Numeric tiers sort
    ascending and the unconditional tier always sorts last.
    """

    sdk_version: int | None = None

    @classmethod
    def unconditional(cls) -> Tier:
        return cls(None)

    @classmethod
    def at(cls, sdk_version: int) -> Tier:
        if isinstance(sdk_version, bool) or not isinstance(sdk_version, int):
            raise ValueError(f"SDK version must be an integer, got {sdk_version!r}")
        return cls(sdk_version)

    @classmethod
    def parse(cls, label: str | int) -> Tier:
        """Inverse of :attr:`label`: ``"any"`` or an integer (or its string form)."""
        if label == ANY_LABEL:
            return cls.unconditional()
        try:
            return cls.at(int(label))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid tier label {label!r}") from None

    @property
    def is_unconditional(self) -> bool:
        return self.sdk_version is None

    @property
    def label(self) -> str:
        """The tier as it appears on the compiler command line."""
        if self.sdk_version is None:
            return ANY_LABEL
        return str(self.sdk_version)

    def _sort_key(self) -> tuple[int, int]:
        if self.sdk_version is None:
            return (1, 0)
        return (0, self.sdk_version)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return self.label


UNCONDITIONAL = Tier.unconditional()


def as_tier(value: Tier | int | str | None) -> Tier:
    """Coerce a tier-like value (Tier, SDK version, label or None) to a Tier."""
    if isinstance(value, Tier):
        return value
    if value is None:
        return UNCONDITIONAL
    if isinstance(value, int):
        return Tier.at(value)
    return Tier.parse(value)

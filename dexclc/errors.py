"""
Errors raised while building a class loader context.

All of them indicate a metadata inconsistency upstream of dexclc and are meant
to abort the build step of the affected module.
"""

from __future__ import annotations


class ClassLoaderContextError(Exception):
    """Base class for class loader context errors."""

    def __init__(self, library: str, message: str) -> None:
        super().__init__(message)
        self.library = library


class UnknownBuildPathError(ClassLoaderContextError):
    """Raised when a library is strictly inserted without a build path."""

    def __init__(self, library: str) -> None:
        super().__init__(library, f"unknown build path to <uses-library> '{library}'")


class UnknownInstallPathError(ClassLoaderContextError):
    """Raised when a non-compatibility library is strictly inserted without an install path."""

    def __init__(self, library: str) -> None:
        super().__init__(library, f"unknown install path to <uses-library> '{library}'")


class UnresolvedLibraryPathError(ClassLoaderContextError):
    """Raised when a tier requests a library whose paths were never resolved."""

    def __init__(self, library: str) -> None:
        super().__init__(
            library, f"dexpreopt cannot find path for <uses-library> '{library}'"
        )

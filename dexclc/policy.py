"""
Path resolution policy for ``<uses-library>`` insertions.

Decides, at insertion time, whether a library with missing paths is an error
right away (strict mode), is recorded for a use-time check (deferred mode), or
gets a default install path because it is a compatibility library.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dexclc.compat import default_install_path, is_compat_library
from dexclc.errors import UnknownBuildPathError, UnknownInstallPathError
from dexclc.types import InsertMode, LibraryEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathResolutionPolicy:
    """
    Validation and defaulting rules for library paths.

    Attributes:
        allow_missing_dependencies: Downgrade strict insertions to deferred
            ones, so that a missing library disables the context for the
            modules that use it instead of failing the whole build.
    """

    allow_missing_dependencies: bool = False

    def effective_mode(self, mode: InsertMode) -> InsertMode:
        if mode is InsertMode.STRICT and self.allow_missing_dependencies:
            return InsertMode.DEFERRED
        return mode

    def resolve(
        self,
        name: str,
        build_path: str | None,
        install_path: str | None,
        mode: InsertMode = InsertMode.STRICT,
    ) -> LibraryEntry:
        """
        Validate the paths of a library and build its entry.

        Args:
            name: Library name.
            build_path: Build host path, or None if unknown.
            install_path: On-device path, or None if unknown.
            mode: STRICT fails on missing paths, DEFERRED records them as unknown.

        Returns:
            The entry to store, possibly with a defaulted install path.

        Raises:
            UnknownBuildPathError: Strict mode and no build path.
            UnknownInstallPathError: Strict mode, no install path, and the
                library is not a compatibility library.
        """
        mode = InsertMode(mode)
        strict = self.effective_mode(mode) is InsertMode.STRICT
        if build_path is None and strict:
            raise UnknownBuildPathError(name)

        if install_path is None:
            if is_compat_library(name):
                install_path = default_install_path(name)
                logger.debug(
                    "Using default install path %s for compatibility library %r",
                    install_path,
                    name,
                )
            elif strict:
                raise UnknownInstallPathError(name)

        entry = LibraryEntry(name=name, build_path=build_path, install_path=install_path)
        if mode is InsertMode.STRICT and not strict and not entry.is_resolved:
            logger.warning(
                "Missing dependencies allowed: deferring path check for <uses-library> %r",
                name,
            )
        return entry


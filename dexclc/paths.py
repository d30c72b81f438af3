"""
LibraryPathTable: per-module ``<uses-library>`` name -> paths mapping.

The table is ordered: entries keep the order in which libraries were declared
for the module, and merged sub-tables are inlined wholesale at the point of the
merge. Lookups return the first entry with a given name.

Example:
    >>> table = LibraryPathTable()
    >>> table.insert("a", "out/a.jar", "/system/a.jar")
    >>> table.insert_if_named(None, None, None)  # unknown library, ignored
    >>> [e.name for e in table]
    ['a']
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from dexclc.policy import PathResolutionPolicy
from dexclc.types import InsertMode, LibraryEntry

logger = logging.getLogger(__name__)


class LibraryPathTable:
    """
    Ordered table of library entries for one module.

    Re-inserting a name that is already present is ignored (first write wins),
    so a library declared directly by a module keeps the paths of that
    declaration. :meth:`merge` does not deduplicate.
    """

    def __init__(
        self,
        entries: Iterable[LibraryEntry] = (),
        *,
        allow_missing_dependencies: bool = False,
    ) -> None:
        self._policy = PathResolutionPolicy(
            allow_missing_dependencies=allow_missing_dependencies
        )
        self._entries: list[LibraryEntry] = list(entries)

    @property
    def policy(self) -> PathResolutionPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert(
        self,
        name: str,
        build_path: str | None,
        install_path: str | None,
        mode: InsertMode = InsertMode.STRICT,
    ) -> None:
        """
        Add a library to the table.

        Args:
            name: Library name.
            build_path: Build host path of the library jar, or None if unknown.
            install_path: On-device path of the library jar, or None if unknown.
            mode: STRICT raises on missing paths, DEFERRED records them.

        Raises:
            UnknownBuildPathError: Strict mode and no build path.
            UnknownInstallPathError: Strict mode and no install path for a
                library that is not a compatibility library.
        """
        entry = self._policy.resolve(name, build_path, install_path, mode)
        if name in self:
            logger.debug("Ignoring repeated <uses-library> %r", name)
            return
        logger.debug(
            "Adding <uses-library> %r: build=%s install=%s",
            name,
            entry.build_path,
            entry.install_path,
        )
        self._entries.append(entry)

    def insert_if_named(
        self,
        name: str | None,
        build_path: str | None,
        install_path: str | None,
    ) -> None:
        """
        Add a library whose name may be unknown, without checking its paths.

        Some libraries are missing from the build, but their names still need
        to reach the manifest; path checks happen when a tier uses them.
        """
        if name is None:
            return
        self.insert(name, build_path, install_path, InsertMode.DEFERRED)

    def merge(self, other: LibraryPathTable) -> None:
        """Append all entries of *other*, in its order, after the current ones."""
        self._entries.extend(other._entries)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> LibraryEntry | None:
        """Return the first entry named *name*, or None."""
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def names(self) -> list[str]:
        return [entry.name for entry in self._entries]

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __iter__(self) -> Iterator[LibraryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"LibraryPathTable({self.names()!r})"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> list[dict[str, Any]]:
        return [
            {
                "name": entry.name,
                "build_path": entry.build_path,
                "install_path": entry.install_path,
            }
            for entry in self._entries
        ]

    @classmethod
    def from_dict(
        cls,
        data: Iterable[dict[str, Any]],
        *,
        allow_missing_dependencies: bool = False,
    ) -> LibraryPathTable:
        """
        Build a table from a list of library records.

        Each record has ``name``, ``build_path`` and ``install_path`` keys, and
        an optional ``optional`` flag selecting deferred insertion.
        """
        table = cls(allow_missing_dependencies=allow_missing_dependencies)
        for raw in data:
            if not isinstance(raw, dict):
                raise ValueError(f"Library record must be a table, got {raw!r}")
            if "name" not in raw:
                raise ValueError(f"Library record without a name: {raw!r}")
            mode = InsertMode.DEFERRED if raw.get("optional", False) else InsertMode.STRICT
            table.insert(raw["name"], raw.get("build_path"), raw.get("install_path"), mode)
        return table

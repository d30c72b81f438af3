"""
ClassLoaderContextMap: tiered class loader context of one compiled artifact.

Each tier (the unconditional one or an SDK-version-gated one) holds an ordered
list of library entries. The map is built by :meth:`ClassLoaderContextMap.add_libraries`
calls, reconciled once by :func:`fix_conditional_class_loader_context`, and then
read by the serializer.

Invariants after fixup:

1. Names are unique within a tier
2. A name in the unconditional tier is in no conditional tier
3. Compatibility libraries without their companion are gone
4. No tier is empty
"""

from __future__ import annotations

import logging
import posixpath
from typing import Iterable, Iterator

from dexclc.compat import SYSTEM_FRAMEWORK_DIR, required_companion
from dexclc.errors import UnresolvedLibraryPathError
from dexclc.paths import LibraryPathTable
from dexclc.types import UNCONDITIONAL, LibraryEntry, Tier, as_tier

logger = logging.getLogger(__name__)


class ClassLoaderContextMap:
    """Mapping of Tier -> ordered list of LibraryEntry."""

    def __init__(self) -> None:
        self._tiers: dict[Tier, list[LibraryEntry]] = {}

    def _tier_entries(self, tier: Tier) -> list[LibraryEntry]:
        return self._tiers.setdefault(tier, [])

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_libraries(
        self,
        tier: Tier | int | str | None,
        source: LibraryPathTable,
        names: Iterable[str],
    ) -> bool:
        """
        Append the named libraries to a tier, resolving them against *source*.

        Names missing from *source* are not applicable to this artifact: they
        are skipped and reported through the return value. Entries appended
        before an error stay in the tier.

        Args:
            tier: Target tier (a Tier, an SDK version, ``"any"`` or None).
            source: The module's library path table.
            names: Library names, in the order they should appear.

        Returns:
            False if at least one name was absent from *source*, True otherwise.

        Raises:
            UnresolvedLibraryPathError: A library is in *source* but one of its
                paths is unknown.
        """
        tier = as_tier(tier)
        entries = self._tier_entries(tier)
        complete = True
        for name in names:
            entry = source.lookup(name)
            if entry is None:
                logger.warning(
                    "<uses-library> %r not found for tier %s, skipping", name, tier
                )
                complete = False
                continue
            if not entry.is_resolved:
                raise UnresolvedLibraryPathError(name)
            entries.append(entry)
        return complete

    def add_system_server_libraries(
        self,
        tier: Tier | int | str | None,
        names: Iterable[str],
        dexjar_dir: str,
    ) -> None:
        """
        Append system server jars to a tier.

        System server jars are compiled together: each one sees the jars that
        precede it on the system server classpath. Their paths are derived
        from the jar name and never unknown.
        """
        entries = self._tier_entries(as_tier(tier))
        for name in names:
            entries.append(
                LibraryEntry(
                    name=name,
                    build_path=posixpath.join(dexjar_dir, name + ".jar"),
                    install_path=posixpath.join(SYSTEM_FRAMEWORK_DIR, name + ".jar"),
                )
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, tier: Tier | int | str | None) -> list[LibraryEntry]:
        """Entries of a tier (a copy); empty if the tier is absent."""
        return list(self._tiers.get(as_tier(tier), ()))

    def tiers(self) -> list[Tier]:
        """Tiers in serialization order: ascending versions, unconditional last."""
        return sorted(self._tiers)

    def items(self) -> Iterator[tuple[Tier, list[LibraryEntry]]]:
        for tier in self.tiers():
            yield tier, list(self._tiers[tier])

    def names(self) -> set[str]:
        """Names present in any tier."""
        return {entry.name for entries in self._tiers.values() for entry in entries}

    def uses_libs(self) -> list[str]:
        """
        Names of the unconditional tier, in insertion order.

        These are the libraries the manifest must list; conditional ones are
        added by the platform itself.
        """
        return [entry.name for entry in self._tiers.get(UNCONDITIONAL, ())]

    def __contains__(self, tier: object) -> bool:
        if not isinstance(tier, (Tier, int, str)) and tier is not None:
            return False
        try:
            return as_tier(tier) in self._tiers
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._tiers)

    def __bool__(self) -> bool:
        return any(self._tiers.values())

    def __repr__(self) -> str:
        body = ", ".join(
            f"{tier.label}: {[e.name for e in entries]}" for tier, entries in self.items()
        )
        return f"ClassLoaderContextMap({{{body}}})"

    # ------------------------------------------------------------------
    # Fixup
    # ------------------------------------------------------------------

    def fixup(self) -> None:
        """Reconcile tiers in place; see :func:`fix_conditional_class_loader_context`."""
        fix_conditional_class_loader_context(self)


def fix_conditional_class_loader_context(clc_map: ClassLoaderContextMap) -> None:
    """
    Reconstruct the conditional tiers now that the unconditional one is known.

    Mirrors what the package manager does when it builds the context on the
    device:

    - a library already in the unconditional tier is dropped from the
      conditional ones
    - a conditional compatibility library whose companion is nowhere in the
      map is dropped
    - repeated names within a tier keep their first occurrence
    - tiers left empty are removed
    """
    uses_libs = set(clc_map.uses_libs())
    present = clc_map.names()

    for tier in list(clc_map._tiers):
        kept: list[LibraryEntry] = []
        seen: set[str] = set()
        for entry in clc_map._tiers[tier]:
            companion = required_companion(entry.name)
            if entry.name in seen:
                logger.debug("Dropping repeated %r from tier %s", entry.name, tier)
            elif not tier.is_unconditional and entry.name in uses_libs:
                logger.debug(
                    "Dropping %r from tier %s: already unconditional", entry.name, tier
                )
            elif (
                not tier.is_unconditional
                and companion is not None
                and companion not in present
            ):
                logger.debug(
                    "Dropping %r from tier %s: %r is not used", entry.name, tier, companion
                )
            else:
                kept.append(entry)
                seen.add(entry.name)

        if kept:
            clc_map._tiers[tier] = kept
        else:
            logger.debug("Dropping empty tier %s", tier)
            del clc_map._tiers[tier]

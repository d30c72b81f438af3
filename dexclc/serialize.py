"""
Serialization of a class loader context.

Two forms are produced:

- the compiler flag protocol: for every tier, ascending versions first and the
  unconditional tier (``any``) last,
  `` --host-context-for-sdk <tier> PCL[<build>]#...``
  followed by `` --target-context-for-sdk <tier> PCL[<install>]#...``
- a JSON form for the dexpreopt config file, keyed by tier label

Both are deterministic: the same map always yields the same bytes.
"""

from __future__ import annotations

import json
from typing import Any

from dexclc.context import ClassLoaderContextMap
from dexclc.types import LibraryEntry, Tier

# Passed to the compiler when the class loader context could not be computed.
UNKNOWN_CLASS_LOADER_CONTEXT = "&"


def _chain(paths: list[str]) -> str:
    return "#".join(f"PCL[{path}]" for path in paths)


def compute_class_loader_context(
    clc_map: ClassLoaderContextMap,
) -> tuple[str, list[str]]:
    """
    Render the map as compiler flags and collect its build paths.

    Args:
        clc_map: A map that went through the fixup pass.

    Returns:
        Tuple of (flag string, build paths of all entries in flag order).
    """
    parts: list[str] = []
    paths: list[str] = []

    for tier, entries in clc_map.items():
        if not entries:
            continue
        host = [entry.build_path for entry in entries]
        target = [entry.install_path for entry in entries]
        parts.append(f" --host-context-for-sdk {tier.label} {_chain(host)}")
        parts.append(f" --target-context-for-sdk {tier.label} {_chain(target)}")
        paths.extend(host)

    return "".join(parts), paths


def class_loader_context_flag(clc_map: ClassLoaderContextMap | None) -> str:
    """Flag string for *clc_map*, or the unknown-context marker for None."""
    if clc_map is None:
        return UNKNOWN_CLASS_LOADER_CONTEXT
    return compute_class_loader_context(clc_map)[0]


# ---------------------------------------------------------------------------
# JSON form
# ---------------------------------------------------------------------------


def to_json_dict(clc_map: ClassLoaderContextMap) -> dict[str, list[dict[str, Any]]]:
    """
    Convert the map to a JSON-compatible dict.

    Example:
        >>> to_json_dict(clc_map)
        {'29': [{'Name': 'x', 'Host': 'out/x.jar', 'Device': '/system/x.jar'}], 'any': [...]}
    """
    return {
        tier.label: [
            {"Name": entry.name, "Host": entry.build_path, "Device": entry.install_path}
            for entry in entries
        ]
        for tier, entries in clc_map.items()
        if entries
    }


def from_json_dict(data: dict[str, Any]) -> ClassLoaderContextMap:
    """
    Rebuild a map from :func:`to_json_dict` output.

    Raises:
        ValueError: On an invalid tier label or a malformed library record.
    """
    if not isinstance(data, dict):
        raise ValueError("class loader context must be a JSON object")

    clc_map = ClassLoaderContextMap()
    for label, records in data.items():
        tier = Tier.parse(label)
        if not isinstance(records, list):
            raise ValueError(f"tier {label!r} must be a list of libraries")
        entries = clc_map._tier_entries(tier)
        for record in records:
            if not isinstance(record, dict) or not all(
                isinstance(record.get(key), str) for key in ("Name", "Host", "Device")
            ):
                raise ValueError(f"invalid library record in tier {label!r}: {record!r}")
            entries.append(
                LibraryEntry(
                    name=record["Name"],
                    build_path=record.get("Host"),
                    install_path=record.get("Device"),
                )
            )
    return clc_map


def dumps_json(clc_map: ClassLoaderContextMap) -> str:
    """Serialize the map to a JSON string (tier order and entry order preserved)."""
    return json.dumps(to_json_dict(clc_map), indent=2)


def loads_json(text: str) -> ClassLoaderContextMap:
    return from_json_dict(json.loads(text))

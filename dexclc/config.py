"""
ProjectConfig: Module-level configuration loader for dexclc.

This module provides:

- find_config_file: Walk up directories to locate .dexclc.toml
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- GlobalConfig: Build-wide settings (system server jars, missing dependencies)
- ModuleConfig: One module's <uses-library> declarations and library paths
- ProjectConfig: Main config object with load/from_dict interface

Configuration is loaded from `.dexclc.toml` with optional `.dexclc.local.toml`
overrides, deep-merged over the base file.

Example:
    >>> config = ProjectConfig.load()
    >>> config.module.uses_libraries
    ['a', 'b']
    >>> config.global_config.allow_missing_dependencies
    False
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dexclc.paths import LibraryPathTable

CONFIG_FILENAME = ".dexclc.toml"
LOCAL_CONFIG_FILENAME = ".dexclc.local.toml"

DEFAULT_SYSTEM_SERVER_DEXJAR_DIR = "out/soong/system_server_dexjars"


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find `.dexclc.toml`.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts. *override* wins for leaf values.

    Lists are leaf values: an override list replaces the base list. Key order
    follows *base*, with keys only in *override* appended. Neither input is
    mutated.
    """
    merged: dict[str, Any] = dict(base)

    for key, over_val in override.items():
        base_val = merged.get(key)
        if isinstance(base_val, dict) and isinstance(over_val, dict):
            merged[key] = deep_merge(base_val, over_val)
        else:
            merged[key] = over_val

    return merged


def _string_list(raw: Any, key: str) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise ValueError(f"{key} must be a list of strings, got {raw!r}")
    return list(raw)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GlobalConfig:
    """
    Build-wide settings from the ``[global]`` table.

    Attributes:
        allow_missing_dependencies: Treat strict library insertions as
            deferred ones.
        system_server_jars: Non-updatable system server jars, in classpath order.
        system_server_dexjar_dir: Build directory holding system server dex jars.
    """

    allow_missing_dependencies: bool = False
    system_server_jars: tuple[str, ...] = ()
    system_server_dexjar_dir: str = DEFAULT_SYSTEM_SERVER_DEXJAR_DIR

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GlobalConfig:
        allow = data.get("allow_missing_dependencies", False)
        if not isinstance(allow, bool):
            raise ValueError(f"allow_missing_dependencies must be a boolean, got {allow!r}")
        return cls(
            allow_missing_dependencies=allow,
            system_server_jars=tuple(
                _string_list(data.get("system_server_jars"), "system_server_jars")
            ),
            system_server_dexjar_dir=data.get(
                "system_server_dexjar_dir", DEFAULT_SYSTEM_SERVER_DEXJAR_DIR
            ),
        )


@dataclass
class ModuleConfig:
    """
    One module's ``<uses-library>`` declarations.

    Attributes:
        name: Module name.
        enforce_uses_libraries: Whether the module declares its libraries
            explicitly (and so gets a class loader context from them).
        uses_libraries: Required libraries, in manifest order.
        optional_uses_libraries: Optional libraries, in manifest order.
        library_paths: Resolved paths of every library the module may use.
    """

    name: str
    enforce_uses_libraries: bool = False
    uses_libraries: list[str] = field(default_factory=list)
    optional_uses_libraries: list[str] = field(default_factory=list)
    library_paths: LibraryPathTable = field(default_factory=LibraryPathTable)


@dataclass
class ProjectConfig:
    """
    Configuration loaded from ``.dexclc.toml``.

    Typical usage::

        config = ProjectConfig.load()
        clc = generate_class_loader_context(config.module, config.global_config)
    """

    global_config: GlobalConfig
    module: ModuleConfig
    source: Path | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, start_dir: Path | None = None) -> ProjectConfig:
        """
        Find and load the configuration.

        Walks up from *start_dir* (default: cwd) to locate ``.dexclc.toml``
        and deep-merges ``.dexclc.local.toml`` from the same directory.

        Raises:
            FileNotFoundError: If no ``.dexclc.toml`` is found.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            raise FileNotFoundError(
                f"Could not find {CONFIG_FILENAME} in {start_dir or Path.cwd()} "
                f"or any parent directory"
            )
        return cls.load_file(config_path)

    @classmethod
    def load_file(cls, config_path: Path) -> ProjectConfig:
        """Load a specific config file (plus its local override file, if any)."""
        config_path = Path(config_path)
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        local_overrides: dict[str, Any] = {}
        local_path = config_path.parent / LOCAL_CONFIG_FILENAME
        if local_path.is_file():
            with open(local_path, "rb") as f:
                local_overrides = tomllib.load(f)

        config = cls.from_dict(data, local_overrides=local_overrides)
        config.source = config_path
        return config

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        local_overrides: dict[str, Any] | None = None,
    ) -> ProjectConfig:
        """
        Create a :class:`ProjectConfig` from a parsed TOML dict.

        Args:
            data: Parsed TOML data (from the base config file).
            local_overrides: Optional parsed TOML data from the local override
                file, deep-merged over *data*.

        Raises:
            ValueError: If the ``[module]`` table is missing or a value has the
                wrong type.
            ClassLoaderContextError: If a strict library record lacks a path.
        """
        if local_overrides:
            data = deep_merge(data, local_overrides)

        global_config = GlobalConfig.from_dict(data.get("global", {}))

        module_raw = data.get("module")
        if not isinstance(module_raw, dict) or "name" not in module_raw:
            raise ValueError("Config needs a [module] table with a name")

        library_paths = LibraryPathTable.from_dict(
            data.get("libraries", []),
            allow_missing_dependencies=global_config.allow_missing_dependencies,
        )

        enforce = module_raw.get("enforce_uses_libraries", False)
        if not isinstance(enforce, bool):
            raise ValueError(f"enforce_uses_libraries must be a boolean, got {enforce!r}")

        module = ModuleConfig(
            name=module_raw["name"],
            enforce_uses_libraries=enforce,
            uses_libraries=_string_list(
                module_raw.get("uses_libraries"), "uses_libraries"
            ),
            optional_uses_libraries=_string_list(
                module_raw.get("optional_uses_libraries"), "optional_uses_libraries"
            ),
            library_paths=library_paths,
        )

        return cls(global_config=global_config, module=module)

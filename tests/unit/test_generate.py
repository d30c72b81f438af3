"""Tests for class loader context generation from module configuration."""

from __future__ import annotations

import pytest

from dexclc.compat import (
    ANDROID_HIDL_BASE,
    ANDROID_HIDL_MANAGER,
    ANDROID_TEST_BASE,
    ANDROID_TEST_MOCK,
    ANDROID_TEST_RUNNER,
    ORG_APACHE_HTTP_LEGACY,
)
from dexclc.config import GlobalConfig, ModuleConfig
from dexclc.errors import UnresolvedLibraryPathError
from dexclc.generate import generate_class_loader_context
from dexclc.paths import LibraryPathTable
from dexclc.serialize import compute_class_loader_context
from dexclc.types import InsertMode


def app_table(*extra: str) -> LibraryPathTable:
    table = LibraryPathTable()
    for name in ("a", "b") + extra:
        table.insert(name, f"out/{name}.jar", f"/system/{name}.jar")
    for name in (
        ORG_APACHE_HTTP_LEGACY,
        ANDROID_HIDL_MANAGER,
        ANDROID_HIDL_BASE,
        ANDROID_TEST_BASE,
        ANDROID_TEST_MOCK,
    ):
        table.insert(name, f"out/{name}.jar", None)
    return table


class TestUsesLibraries:
    def test_standard_tiers(self):
        module = ModuleConfig(
            name="app",
            enforce_uses_libraries=True,
            uses_libraries=["a"],
            optional_uses_libraries=["b"],
            library_paths=app_table(),
        )
        clc = generate_class_loader_context(module)
        assert clc is not None
        assert [t.label for t in clc.tiers()] == ["28", "29", "30", "any"]
        assert clc.uses_libs() == ["a", "b"]
        assert [e.name for e in clc.get(29)] == [ANDROID_HIDL_MANAGER, ANDROID_HIDL_BASE]
        # android.test.mock is dropped without android.test.runner.
        assert [e.name for e in clc.get(30)] == [ANDROID_TEST_BASE]

    def test_compat_library_declared_by_app(self):
        """A compatibility library the app uses directly only appears as unconditional."""
        module = ModuleConfig(
            name="app",
            enforce_uses_libraries=True,
            uses_libraries=[ORG_APACHE_HTTP_LEGACY, ANDROID_TEST_RUNNER],
            library_paths=app_table(ANDROID_TEST_RUNNER),
        )
        clc = generate_class_loader_context(module)
        assert [t.label for t in clc.tiers()] == ["29", "30", "any"]
        assert [e.name for e in clc.get(30)] == [ANDROID_TEST_BASE, ANDROID_TEST_MOCK]

    def test_missing_library_gives_unknown_context(self, caplog):
        module = ModuleConfig(
            name="app",
            enforce_uses_libraries=True,
            uses_libraries=["a", "missing"],
            library_paths=app_table(),
        )
        assert generate_class_loader_context(module) is None
        assert "unknown" in caplog.text

    def test_unresolved_library_raises(self):
        table = app_table()
        table.insert("maybe", None, None, InsertMode.DEFERRED)
        module = ModuleConfig(
            name="app",
            enforce_uses_libraries=True,
            uses_libraries=["maybe"],
            library_paths=table,
        )
        with pytest.raises(UnresolvedLibraryPathError, match="'maybe'"):
            generate_class_loader_context(module)

    def test_not_enforced(self):
        module = ModuleConfig(name="app", uses_libraries=["a"], library_paths=app_table())
        clc = generate_class_loader_context(module)
        assert clc is not None
        assert compute_class_loader_context(clc) == ("", [])


class TestSystemServerJars:
    def test_preceding_jars(self):
        global_config = GlobalConfig(
            system_server_jars=("services", "wifi-service", "ethernet-service"),
            system_server_dexjar_dir="out/dexjars",
        )
        module = ModuleConfig(name="ethernet-service", enforce_uses_libraries=True)
        clc = generate_class_loader_context(module, global_config)
        flags, paths = compute_class_loader_context(clc)
        assert clc.uses_libs() == ["services", "wifi-service"]
        assert paths == ["out/dexjars/services.jar", "out/dexjars/wifi-service.jar"]
        assert flags.endswith(
            " --target-context-for-sdk any "
            "PCL[/system/framework/services.jar]#PCL[/system/framework/wifi-service.jar]"
        )

    def test_first_jar_has_empty_context(self):
        global_config = GlobalConfig(system_server_jars=("services", "wifi-service"))
        clc = generate_class_loader_context(ModuleConfig(name="services"), global_config)
        assert len(clc) == 0

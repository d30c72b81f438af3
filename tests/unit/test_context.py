"""Tests for ClassLoaderContextMap and the fixup pass."""

from __future__ import annotations

import logging

import pytest

from dexclc.compat import (
    ANDROID_HIDL_BASE,
    ANDROID_HIDL_MANAGER,
    ANDROID_TEST_MOCK,
    ANDROID_TEST_RUNNER,
)
from dexclc.context import ClassLoaderContextMap, fix_conditional_class_loader_context
from dexclc.errors import UnresolvedLibraryPathError
from dexclc.paths import LibraryPathTable
from dexclc.types import UNCONDITIONAL, InsertMode, Tier


@pytest.fixture
def table() -> LibraryPathTable:
    table = LibraryPathTable()
    for name in ["a", "b", "c", "f", ANDROID_TEST_RUNNER]:
        table.insert(name, f"out/{name}.jar", f"/system/{name}.jar")
    for name in [ANDROID_HIDL_MANAGER, ANDROID_HIDL_BASE, ANDROID_TEST_MOCK]:
        table.insert(name, f"out/{name}.jar", None)
    table.insert("unknown", None, None, InsertMode.DEFERRED)
    return table


def names(clc: ClassLoaderContextMap, tier) -> list[str]:
    return [e.name for e in clc.get(tier)]


class TestAddLibraries:
    def test_appends_in_request_order(self, table):
        clc = ClassLoaderContextMap()
        assert clc.add_libraries(UNCONDITIONAL, table, ["c", "a", "b"])
        assert names(clc, UNCONDITIONAL) == ["c", "a", "b"]

    def test_calls_accumulate(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["b"])
        clc.add_libraries(None, table, ["a"])
        clc.add_libraries("any", table, ["c"])
        assert clc.uses_libs() == ["b", "a", "c"]

    def test_missing_name_reports_false(self, table, caplog):
        clc = ClassLoaderContextMap()
        with caplog.at_level(logging.WARNING, logger="dexclc.context"):
            ok = clc.add_libraries(UNCONDITIONAL, table, ["a", "nope", "b"])
        assert ok is False
        # The remaining names are still added.
        assert names(clc, UNCONDITIONAL) == ["a", "b"]
        assert "nope" in caplog.text

    def test_unresolved_raises(self, table):
        clc = ClassLoaderContextMap()
        with pytest.raises(UnresolvedLibraryPathError) as exc_info:
            clc.add_libraries(UNCONDITIONAL, table, ["a", "unknown", "b"])
        assert exc_info.value.library == "unknown"
        # Entries before the failure remain.
        assert names(clc, UNCONDITIONAL) == ["a"]

    def test_int_tier(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(29, table, [ANDROID_HIDL_BASE])
        assert Tier.at(29) in clc
        assert clc.get(29)[0].install_path == f"/system/framework/{ANDROID_HIDL_BASE}.jar"

    def test_contains_accepts_tier_like_values(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(29, table, ["a"])
        clc.add_libraries(UNCONDITIONAL, table, ["b"])
        assert 29 in clc
        assert "29" in clc
        assert "any" in clc
        assert 30 not in clc
        assert "latest" not in clc
        assert 2.5 not in clc

    def test_tiers_sorted(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a"])
        clc.add_libraries(30, table, ["b"])
        clc.add_libraries(28, table, ["c"])
        assert [t.label for t in clc.tiers()] == ["28", "30", "any"]

    def test_uses_libs_without_unconditional(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(29, table, ["a"])
        assert clc.uses_libs() == []


class TestSystemServerLibraries:
    def test_paths_derived_from_name(self):
        clc = ClassLoaderContextMap()
        clc.add_system_server_libraries(UNCONDITIONAL, ["services", "wifi"], "out/dexjars")
        entries = clc.get(UNCONDITIONAL)
        assert [e.build_path for e in entries] == ["out/dexjars/services.jar", "out/dexjars/wifi.jar"]
        assert [e.install_path for e in entries] == [
            "/system/framework/services.jar",
            "/system/framework/wifi.jar",
        ]


class TestFixup:
    def test_removes_conditional_duplicates(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a", "f"])
        clc.add_libraries(29, table, [ANDROID_HIDL_BASE, "f"])
        clc.add_libraries(42, table, ["f"])
        fix_conditional_class_loader_context(clc)
        assert names(clc, 29) == [ANDROID_HIDL_BASE]
        assert Tier.at(42) not in clc
        assert names(clc, UNCONDITIONAL) == ["a", "f"]

    def test_mock_without_runner_removed(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a"])
        assert clc.add_libraries(30, table, [ANDROID_TEST_MOCK])
        clc.fixup()
        assert Tier.at(30) not in clc
        assert [t.label for t in clc.tiers()] == ["any"]

    def test_mock_with_runner_kept(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a", ANDROID_TEST_RUNNER])
        clc.add_libraries(30, table, [ANDROID_TEST_MOCK])
        clc.fixup()
        assert names(clc, 30) == [ANDROID_TEST_MOCK]

    def test_unconditional_mock_untouched(self, table):
        """An app that declares android.test.mock itself keeps it."""
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, [ANDROID_TEST_MOCK])
        clc.fixup()
        assert clc.uses_libs() == [ANDROID_TEST_MOCK]

    def test_duplicates_within_tier_collapsed(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a", "b"])
        clc.add_libraries(UNCONDITIONAL, table, ["a"])
        clc.fixup()
        assert clc.uses_libs() == ["a", "b"]

    def test_empty_tier_dropped(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(28, table, ["nope"])
        assert Tier.at(28) in clc
        clc.fixup()
        assert Tier.at(28) not in clc
        assert len(clc) == 0
        assert not clc

    def test_invariants(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a", "b", "c"])
        clc.add_libraries(28, table, ["c", "a", "f"])
        clc.add_libraries(29, table, ["b", ANDROID_HIDL_MANAGER, ANDROID_HIDL_MANAGER])
        clc.add_libraries(30, table, [ANDROID_TEST_MOCK])
        clc.fixup()

        unconditional = set(clc.uses_libs())
        for tier, entries in clc.items():
            tier_names = [e.name for e in entries]
            assert entries
            assert len(tier_names) == len(set(tier_names))
            if not tier.is_unconditional:
                assert not unconditional & set(tier_names)

    def test_idempotent(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a"])
        clc.add_libraries(29, table, ["a", ANDROID_HIDL_BASE])
        clc.fixup()
        before = repr(clc)
        clc.fixup()
        assert repr(clc) == before

    def test_repr(self, table):
        clc = ClassLoaderContextMap()
        clc.add_libraries(UNCONDITIONAL, table, ["a"])
        clc.add_libraries(29, table, [ANDROID_HIDL_BASE])
        assert repr(clc) == (
            f"ClassLoaderContextMap({{29: ['{ANDROID_HIDL_BASE}'], any: ['a']}})"
        )

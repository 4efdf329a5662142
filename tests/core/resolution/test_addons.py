"""Tests for native addon prebuild lookup."""

from __future__ import annotations

import pytest

from pearshaker.core.models import ModuleURL, Resolved, Unresolved
from pearshaker.core.resolution.addons import prebuild_name, resolve_addon
from pearshaker.store import MemoryStore

HOSTS = ("linux-x64", "darwin-arm64")


@pytest.fixture
def addon_store() -> MemoryStore:
    return MemoryStore.from_mapping(
        {
            "/package.json": '{"name": "app"}',
            "/index.js": "require.addon()",
            "/prebuilds/darwin-arm64/app.bare": "",
            "/node_modules/@s/native/package.json": '{"name": "@s/native"}',
            "/node_modules/@s/native/prebuilds/linux-x64/@s+native.node": "",
        }
    )


class TestPrebuildName:
    def test_manifest_name(self) -> None:
        assert prebuild_name("/x", {"name": "@scope/pkg"}) == "@scope+pkg"

    def test_directory_fallback(self) -> None:
        assert prebuild_name("/node_modules/thing", None) == "thing"
        assert prebuild_name("/node_modules/thing", {"name": 3}) == "thing"


class TestResolveAddon:
    def test_self_package(self, addon_store: MemoryStore) -> None:
        outcome = resolve_addon(addon_store, ".", ModuleURL.for_path("/index.js"), hosts=HOSTS)
        assert outcome == Resolved(ModuleURL.for_path("/prebuilds/darwin-arm64/app.bare"))

    def test_empty_specifier_means_self(self, addon_store: MemoryStore) -> None:
        outcome = resolve_addon(addon_store, "", ModuleURL.for_path("/index.js"), hosts=HOSTS)
        assert isinstance(outcome, Resolved)

    def test_host_order_wins_over_extension_order(self, addon_store: MemoryStore) -> None:
        addon_store.put("/prebuilds/linux-x64/app.bare", "")
        addon_store.put("/prebuilds/darwin-arm64/app.node", "")
        outcome = resolve_addon(addon_store, ".", ModuleURL.for_path("/index.js"), hosts=HOSTS)
        assert outcome.url.pathname == "/prebuilds/linux-x64/app.bare"

    def test_scoped_package(self, addon_store: MemoryStore) -> None:
        outcome = resolve_addon(
            addon_store, "@s/native", ModuleURL.for_path("/index.js"), hosts=HOSTS
        )
        assert outcome.url.pathname == (
            "/node_modules/@s/native/prebuilds/linux-x64/@s+native.node"
        )

    def test_missing_prebuild_lists_candidates(self, addon_store: MemoryStore) -> None:
        outcome = resolve_addon(
            addon_store, ".", ModuleURL.for_path("/index.js"), hosts=("win32-x64",)
        )
        assert isinstance(outcome, Unresolved)
        assert outcome.candidates == (
            "drive:///prebuilds/win32-x64/app.node",
            "drive:///prebuilds/win32-x64/app.bare",
        )

    def test_unknown_package(self, addon_store: MemoryStore) -> None:
        outcome = resolve_addon(addon_store, "ghost", ModuleURL.for_path("/index.js"), hosts=HOSTS)
        assert outcome == Unresolved("ghost", ModuleURL.for_path("/index.js"), ())

    def test_hash_remap(self, addon_store: MemoryStore) -> None:
        addon_store.put(
            "/package.json",
            '{"name": "app", "imports": {"#native": {"bare": "@s/native"}}}',
        )
        outcome = resolve_addon(
            addon_store,
            "#native",
            ModuleURL.for_path("/index.js"),
            hosts=HOSTS,
            conditions=[("addon", "bare")],
        )
        assert outcome.url.pathname.endswith("/@s+native.node")

    def test_linked_not_supported(self, addon_store: MemoryStore) -> None:
        with pytest.raises(ValueError, match="not supported"):
            resolve_addon(addon_store, ".", None, hosts=HOSTS, linked=True)

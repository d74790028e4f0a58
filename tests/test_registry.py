"""Tests for nalagen/variants/registry.py and discovery.py."""

import json
import logging

import pytest

from nalagen.config.schema import ProjectSettings, VariantEntry
from nalagen.types import SurfaceRules, TestType, VariantOrigin
from nalagen.variants.discovery import DiscoveryCache, variant_name_from_file
from nalagen.variants.registry import VariantRegistry


# ── Helpers ───────────────────────────────────────────────────────────────────

class _Clock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


# ── Lifecycle ─────────────────────────────────────────────────────────────────

class TestInitialize:

    def test_builtin_catalog_loaded_without_all(self, registry):
        assert registry.get("fries").origin == VariantOrigin.BUILTIN
        assert registry.get("fries").surface == "commerce"
        assert registry.get("suggested").label == "CCD Suggested"
        assert not registry.has("all")

    def test_discovered_variants_registered(self, registry, settings):
        promo = registry.get("ccd-promo")
        assert promo.origin == VariantOrigin.DISCOVERED
        assert promo.surface == "ccd"
        assert promo.source_path == str(settings.variants_dir / "ccd-promo.js")

    def test_test_files_and_non_js_ignored(self, registry):
        assert not registry.has("fries.test")
        assert not registry.has("README")

    def test_custom_overrides_builtin(self, project_root, lister):
        settings = ProjectSettings(
            root=project_root,
            variants={"fries": VariantEntry(label="Fries Custom", surface="checkout")},
        )
        registry = VariantRegistry(settings, lister=lister)
        registry.initialize()
        fries = registry.get("fries")
        assert fries.origin == VariantOrigin.CUSTOM
        assert fries.surface == "checkout"
        assert fries.label == "Fries Custom"

    def test_second_initialize_is_noop(self, registry, lister):
        calls = lister.list_calls
        registry.register("temp")
        registry.initialize()
        assert registry.has("temp")
        assert lister.list_calls == calls

    def test_initialize_without_discovery(self, settings, lister):
        registry = VariantRegistry(settings, lister=lister)
        registry.initialize(discover=False)
        assert registry.initialized
        assert lister.list_calls == 0
        assert registry.has("fries")
        assert not registry.has("ccd-promo")

        result = registry.discover(force=True)
        assert result.discovered == ["ccd-promo"]
        assert result.skipped == ["fries"]

    def test_dispose_clears_state(self, registry):
        registry.dispose()
        assert not registry.initialized
        assert registry.all_names() == []

    def test_missing_variants_directory_degrades_to_builtin(self, settings, make_lister):
        registry = VariantRegistry(settings, lister=make_lister(broken=True))
        registry.initialize()
        assert registry.has("fries")
        assert registry.by_origin(VariantOrigin.DISCOVERED) == []

    def test_broken_catalog_degrades_to_empty(self, settings, make_lister, tmp_path):
        bad = tmp_path / "variants.yaml"
        bad.write_text("variants: [unclosed", encoding="utf-8")
        registry = VariantRegistry(settings, catalog_path=bad, lister=make_lister(broken=True))
        registry.initialize()
        assert registry.by_origin(VariantOrigin.BUILTIN) == []


# ── Registration ──────────────────────────────────────────────────────────────

class TestRegister:

    def test_defaults_from_name(self, registry):
        d = registry.register("ccd-mini-card")
        assert d.label == "Ccd Mini Card"
        assert d.surface == "ccd"
        assert d.origin == VariantOrigin.CUSTOM
        assert TestType.CSS in d.test_types

    def test_idempotent_registration(self, registry):
        registry.register("promo", surface="acom")
        registry.register("promo", surface="acom")
        assert registry.all_names().count("promo") == 1

    def test_reregistration_overwrites(self, registry):
        registry.register("promo", surface="acom")
        registry.register("promo", surface="ccd", label="Promo")
        assert registry.get("promo").surface == "ccd"

    def test_remove_absent_is_fine(self, registry):
        assert registry.remove("never-there") is False
        registry.register("promo")
        assert registry.remove("promo") is True
        assert not registry.has("promo")

    def test_project_rules_drive_detection(self, project_root, make_lister):
        settings = ProjectSettings(root=project_root, surface_rules=SurfaceRules(patterns={"mini-*": "mini"}))
        registry = VariantRegistry(settings, lister=make_lister(broken=True))
        assert registry.detect_surface("mini-card") == "mini"
        assert registry.detect_surface("ccd-x") == "ccd"


# ── is_valid ──────────────────────────────────────────────────────────────────

class TestIsValid:

    def test_known_variant(self, registry):
        assert registry.is_valid("fries") is True

    def test_unknown_on_disk_becomes_discovered(self, registry, lister, settings):
        lister.files[settings.variants_dir].append("brand-new.js")
        assert registry.is_valid("brand-new") is True
        assert registry.get("brand-new").origin == VariantOrigin.DISCOVERED

    def test_unknown_everywhere_becomes_dynamic(self, registry, caplog):
        with caplog.at_level(logging.WARNING):
            assert registry.is_valid("mystery-card") is True
        assert registry.get("mystery-card").origin == VariantOrigin.DYNAMIC
        assert "not found in project" in caplog.text

    def test_never_raises_on_odd_names(self, registry):
        assert registry.is_valid("") is True


# ── Discovery cache ───────────────────────────────────────────────────────────

class TestDiscovery:

    def test_cached_within_ttl(self, settings, lister):
        clock = _Clock()
        registry = VariantRegistry(settings, lister=lister, clock=clock, ttl_seconds=60)
        registry.initialize()
        calls = lister.list_calls
        clock.now += 30
        result = registry.discover()
        assert result.cached is True
        assert lister.list_calls == calls

    def test_rescans_after_ttl(self, settings, lister):
        clock = _Clock()
        registry = VariantRegistry(settings, lister=lister, clock=clock, ttl_seconds=60)
        registry.initialize()
        clock.now += 61
        lister.files[settings.variants_dir].append("later.js")
        result = registry.discover()
        assert result.discovered == ["later"]

    def test_force_bypasses_cache(self, settings, lister):
        registry = VariantRegistry(settings, lister=lister, clock=_Clock())
        registry.initialize()
        calls = lister.list_calls
        result = registry.discover(force=True)
        assert lister.list_calls == calls + 1
        assert set(result.skipped) == {"fries", "ccd-promo"}

    def test_error_reported_not_raised(self, settings, make_lister):
        registry = VariantRegistry(settings, lister=make_lister(broken=True))
        result = registry.discover(force=True)
        assert result.error

    @pytest.mark.parametrize("filename,expected", [
        ("fries.js", "fries"),
        ("fries.test.js", None),
        ("fries.ts", None),
        (".js", None),
    ])
    def test_variant_name_from_file(self, filename, expected):
        assert variant_name_from_file(filename) == expected

    def test_cache_invalidate(self):
        cache = DiscoveryCache(ttl_seconds=10, clock=_Clock())
        cache.store(["a"])
        assert cache.is_fresh()
        cache.invalidate()
        assert not cache.is_fresh()
        assert cache.names == []


# ── save_to_config ────────────────────────────────────────────────────────────

class TestSaveToConfig:

    def test_writes_only_custom_and_keeps_other_keys(self, registry, settings):
        settings.config_path.write_text(json.dumps({"testOutputPath": "nala", "extra": 1}), encoding="utf-8")
        registry.register("promo", surface="acom", selectors={"title": "h3"})
        assert registry.save_to_config() is True

        data = json.loads(settings.config_path.read_text(encoding="utf-8"))
        assert data["extra"] == 1
        assert list(data["variants"]) == ["promo"]
        assert data["variants"]["promo"]["surface"] == "acom"
        assert data["variants"]["promo"]["selectors"] == {"title": "h3"}
        assert data["surfaceRules"]["default"] == "acom"

    def test_named_project_entry_updated(self, project_root, make_lister):
        config_path = project_root / ".nala-mcp.json"
        config_path.write_text(json.dumps({"projects": {"mas": {"path": str(project_root)}}}), encoding="utf-8")
        settings = ProjectSettings(name="mas", root=project_root, config_path=config_path)
        registry = VariantRegistry(settings, lister=make_lister(broken=True))
        registry.register("promo")
        assert registry.save_to_config()
        data = json.loads(config_path.read_text(encoding="utf-8"))
        assert "promo" in data["projects"]["mas"]["variants"]
        assert "variants" not in data

    def test_unwritable_path_returns_false(self, registry, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        assert registry.save_to_config(blocker / "sub" / "config.json") is False

    def test_saved_variant_reloads_as_custom(self, registry, settings, lister):
        from nalagen.config import load_project_settings
        registry.register("promo", surface="ccd")
        registry.save_to_config()
        reloaded = VariantRegistry(load_project_settings(settings.config_path), lister=lister)
        reloaded.initialize()
        assert reloaded.get("promo").origin == VariantOrigin.CUSTOM
        assert reloaded.get("promo").surface == "ccd"

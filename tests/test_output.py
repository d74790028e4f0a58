"""Tests for nalagen/output and nalagen/pipeline.py."""

import pytest

from nalagen.config.schema import ProjectSettings
from nalagen.exceptions import GenerationError, InvalidInputError
from nalagen.generators import PageObjectGenerator, SpecGenerator, TestImplGenerator
from nalagen.output import FileOutput, PathResolver, summarize
from nalagen.pipeline import SuiteBuilder
from nalagen.types import (
    ArtifactKind, ComponentConfig, GeneratedArtifact, MiloCategory, ProjectType, TestType, VariantOrigin, WriteResult,
)
from nalagen.variants.registry import VariantRegistry


# ── Helpers ───────────────────────────────────────────────────────────────────

def _make_builder(settings, registry, fixed_clock, dry_run=False) -> SuiteBuilder:
    return SuiteBuilder(
        settings,
        registry,
        output=FileOutput(dry_run=dry_run),
        page_objects=PageObjectGenerator(clock=fixed_clock),
        specs=SpecGenerator(clock=fixed_clock),
        tests=TestImplGenerator(import_paths=settings.import_paths, clock=fixed_clock),
    )


def _make_config(component_type: str) -> ComponentConfig:
    return ComponentConfig.model_validate({
        "cardType": component_type,
        "elements": {"title": {"selector": "h3"}},
    })


# ── Paths ─────────────────────────────────────────────────────────────────────

class TestPathResolver:

    def test_card_layout(self, settings, project_root):
        paths = PathResolver(settings).card_paths("fries", "commerce", TestType.CSS)
        base = project_root / "nala" / "studio" / "commerce" / "fries"
        assert paths.directory == base
        assert paths.page_object == base / "fries.page.js"
        assert paths.spec == base / "specs" / "fries_css.spec.js"
        assert paths.test == base / "tests" / "fries_css.test.js"

    def test_custom_output_path(self, project_root):
        settings = ProjectSettings(root=project_root, test_output_path="e2e/nala")
        paths = PathResolver(settings).card_paths("slice", "ccd", "edit")
        assert paths.test == project_root / "e2e" / "nala" / "studio" / "ccd" / "slice" / "tests" / "slice_edit.test.js"

    def test_milo_block_layout(self, project_root):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        paths = PathResolver(settings).milo_paths("marquee")
        base = project_root / "nala" / "blocks" / "marquee"
        assert paths.page_object == base / "marquee.page.js"
        assert paths.spec == base / "marquee.spec.js"
        assert paths.test == base / "marquee.test.js"

    def test_milo_nested_feature(self, project_root):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        paths = PathResolver(settings).milo_paths("commerce/promotions", MiloCategory.FEATURE)
        assert paths.test == project_root / "nala" / "features" / "commerce" / "promotions" / "promotions.test.js"

    def test_milo_layout_rejected_for_mas(self, settings):
        with pytest.raises(InvalidInputError, match="Milo layout"):
            PathResolver(settings).milo_paths("marquee")

    @pytest.mark.parametrize("block", ["/tmp/escaped", "../../escaped", "a/../../escaped"])
    def test_milo_block_stays_under_output_root(self, project_root, block):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        paths = PathResolver(settings).milo_paths(block)
        blocks = project_root / "nala" / "blocks"
        assert paths.test.name == "escaped.test.js"
        assert paths.directory.is_relative_to(blocks)
        assert ".." not in paths.directory.parts

    def test_milo_absolute_block_nested_under_blocks(self, project_root):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        paths = PathResolver(settings).milo_paths("/tmp/escaped")
        assert paths.page_object == project_root / "nala" / "blocks" / "tmp" / "escaped" / "escaped.page.js"

    @pytest.mark.parametrize("block", ["", "/", "./..", "//"])
    def test_milo_block_without_name_rejected(self, project_root, block):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        with pytest.raises(InvalidInputError, match="No block name"):
            PathResolver(settings).milo_paths(block)

    @pytest.mark.parametrize("category", ["widget", "", None])
    def test_milo_unknown_category(self, project_root, category):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        with pytest.raises(GenerationError, match="block.*feature"):
            PathResolver(settings).milo_paths("marquee", category)

    def test_milo_category_accepts_plain_strings(self, project_root):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        paths = PathResolver(settings).milo_paths("commerce", "feature")
        assert paths.directory == project_root / "nala" / "features" / "commerce"


# ── Writer ────────────────────────────────────────────────────────────────────

class TestFileOutput:

    def test_creates_parents_and_overwrites(self, tmp_path):
        target = tmp_path / "a" / "b" / "x.js"
        out = FileOutput()
        assert out.write(target, "one").success
        result = out.write(target, "two")
        assert result.success
        assert result.message == f"File saved to: {target}"
        assert target.read_text(encoding="utf-8") == "two"

    def test_dry_run_touches_nothing(self, tmp_path):
        target = tmp_path / "x.js"
        result = FileOutput(dry_run=True).write(target, "content")
        assert result.success
        assert result.message.startswith("Would write")
        assert not target.exists()

    def test_failure_is_per_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        results = FileOutput().write_all([
            GeneratedArtifact(kind=ArtifactKind.PAGE_OBJECT, path=str(blocker / "x.page.js"), content="x"),
            GeneratedArtifact(kind=ArtifactKind.SPEC, path=str(tmp_path / "ok.spec.js"), content="y"),
        ])
        assert [r.success for r in results] == [False, True]
        assert results[0].error
        assert results[0].message.startswith("Failed to save file:")

    def test_summarize(self):
        results = [
            WriteResult(path="a", success=True),
            WriteResult(path="b", success=False, error="denied"),
        ]
        assert summarize(results) == {"total": 2, "written": 1, "failed": 1, "failures": {"b": "denied"}}


# ── Pipeline ──────────────────────────────────────────────────────────────────

class TestSuiteBuilder:

    def test_generate_writes_three_files(self, settings, registry, sample_config, fixed_clock, project_root):
        results = _make_builder(settings, registry, fixed_clock).generate(sample_config, TestType.CSS)
        assert all(r.success for r in results)
        base = project_root / "nala" / "studio" / "commerce" / "fries"
        assert [r.path for r in results] == [
            str(base / "fries.page.js"),
            str(base / "specs" / "fries_css.spec.js"),
            str(base / "tests" / "fries_css.test.js"),
        ]
        assert (base / "fries.page.js").read_text(encoding="utf-8").startswith(
            "// Generated by nalagen on 2025-01-15\n"
        )

    def test_unknown_variant_goes_to_default_surface(self, settings, registry, fixed_clock, project_root):
        config = _make_config("mystery")
        results = _make_builder(settings, registry, fixed_clock).generate(config, TestType.CSS)
        assert results[0].path == str(project_root / "nala" / "studio" / "acom" / "mystery" / "mystery.page.js")
        assert registry.get("mystery").origin == VariantOrigin.DYNAMIC

    def test_discovered_variant_surface(self, settings, registry, fixed_clock, project_root):
        paths = _make_builder(settings, registry, fixed_clock).resolve("ccd-promo", TestType.EDIT)
        assert paths.test == project_root / "nala" / "studio" / "ccd" / "ccd-promo" / "tests" / "ccd-promo_edit.test.js"

    def test_regeneration_is_identical(self, settings, registry, sample_config, fixed_clock):
        builder = _make_builder(settings, registry, fixed_clock)
        first = [a.content for a in builder.artifacts(sample_config, TestType.EDIT)]
        second = [a.content for a in builder.artifacts(sample_config, TestType.EDIT)]
        assert first == second

    def test_suite_writes_page_object_once(self, settings, registry, sample_config, fixed_clock):
        results = _make_builder(settings, registry, fixed_clock).generate_suite(sample_config)
        assert list(results) == [TestType.CSS, TestType.EDIT]
        assert len(results[TestType.CSS]) == 3
        assert len(results[TestType.EDIT]) == 2
        assert results[TestType.EDIT][0].path.endswith("fries_edit.spec.js")

    def test_dry_run(self, settings, registry, sample_config, fixed_clock, project_root):
        results = _make_builder(settings, registry, fixed_clock, dry_run=True).generate(sample_config, TestType.CSS)
        assert all(r.success for r in results)
        assert not (project_root / "nala").exists()

    def test_milo_generation(self, project_root, make_lister, fixed_clock):
        settings = ProjectSettings(root=project_root, type=ProjectType.MILO)
        registry = VariantRegistry(settings, lister=make_lister(broken=True))
        builder = _make_builder(settings, registry, fixed_clock)
        results = builder.generate_milo("commerce/promotions", TestType.FUNCTIONAL, MiloCategory.FEATURE)
        assert all(r.success for r in results)
        test_file = project_root / "nala" / "features" / "commerce" / "promotions" / "promotions.test.js"
        assert "import Promotions from './promotions.page.js';" in test_file.read_text(encoding="utf-8")

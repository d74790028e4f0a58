"""Tests for nalagen/generators/milo.py."""

import logging

import pytest

from nalagen.config.loader import load_milo_types
from nalagen.exceptions import GenerationError
from nalagen.generators.milo import MiloGenerator, milo_category
from nalagen.types import MiloCategory, TestType


def _make_generator(fixed_clock=None) -> MiloGenerator:
    if fixed_clock is None:
        return MiloGenerator(milo_types=load_milo_types(), stamp=False)
    return MiloGenerator(milo_types=load_milo_types(), clock=fixed_clock)


class TestMiloCategory:

    def test_strings_and_members_accepted(self):
        assert milo_category("feature") is MiloCategory.FEATURE
        assert milo_category(MiloCategory.BLOCK) is MiloCategory.BLOCK

    def test_unknown_category_is_generation_error(self):
        with pytest.raises(GenerationError) as exc_info:
            milo_category("widget")
        assert exc_info.value.details == {"category": "widget"}

    def test_generator_methods_reject_unknown_category(self):
        generator = _make_generator()
        with pytest.raises(GenerationError, match="'widget'"):
            generator.display_name("marquee", category="widget")
        with pytest.raises(GenerationError, match="'widget'"):
            generator.spec("marquee", category="widget")
        with pytest.raises(GenerationError, match="'widget'"):
            generator.test("marquee", TestType.FUNCTIONAL, category="widget")


class TestDisplayName:

    def test_known_block(self):
        assert _make_generator().display_name("icon-block") == "Icon Block"

    def test_known_feature(self):
        assert _make_generator().display_name("georouting", MiloCategory.FEATURE) == "Georouting"

    def test_unknown_shown_as_is(self):
        assert _make_generator().display_name("new-block") == "new-block"

    def test_empty_catalog(self):
        assert MiloGenerator().display_name("marquee") == "marquee"


class TestMiloPageObject:

    def test_class_and_locators(self, fixed_clock):
        out = _make_generator(fixed_clock).page_object("icon-block")
        assert out.startswith("// Generated by nalagen on 2025-01-15\n")
        assert "export default class IconBlock {" in out
        assert "this.iconblock = this.page.locator('.icon-block').nth(nth);" in out
        assert "class: 'icon-block con-block'," in out


class TestMiloSpec:

    def test_commonjs_block_spec(self):
        out = _make_generator().spec("marquee")
        assert out.startswith("module.exports = {")
        assert "FeatureName: 'Marquee Block'," in out
        assert "path: '/drafts/nala/blocks/marquee/marquee'," in out
        assert "path: '/drafts/nala/blocks/marquee/marquee-variant'," in out
        assert "tags: '@marquee @smoke @regression @milo'," in out

    def test_feature_spec(self):
        out = _make_generator().spec("georouting", MiloCategory.FEATURE)
        assert "FeatureName: 'Georouting Feature'," in out
        assert "path: '/drafts/nala/features/georouting/georouting'," in out


class TestMiloTest:

    def test_imports_have_no_studio_page(self):
        out = _make_generator().test("marquee", TestType.FUNCTIONAL)
        assert "import { expect, test } from '@playwright/test';" in out
        assert "import { features } from './marquee.spec.js';" in out
        assert "import Marquee from './marquee.page.js';" in out
        assert "import WebUtil from '../../libs/webutil.js';" in out
        assert "StudioPage" not in out

    def test_functional_has_main_and_variant_tests(self):
        out = _make_generator().test("marquee", TestType.FUNCTIONAL)
        assert "test.describe('Milo Marquee Block test suite', () => {" in out
        assert "features[0]" in out and "features[1]" in out
        assert "await webUtil.getSectionDaalh(1));" in out
        assert out.rstrip().endswith("});")

    def test_css_single_test(self):
        out = _make_generator().test("marquee", TestType.CSS)
        assert "test.describe('Milo Marquee CSS test suite', () => {" in out
        assert " - CSS verification," in out
        assert "features[1]" not in out

    def test_interaction_single_test(self):
        out = _make_generator().test("marquee", TestType.INTERACTION)
        assert "await marquee.button.first().click();" in out

    def test_other_types_fall_back_to_functional(self, caplog):
        gen = _make_generator()
        with caplog.at_level(logging.INFO):
            out = gen.test("marquee", TestType.SAVE)
        assert out == gen.test("marquee", TestType.FUNCTIONAL)
        assert "using functional" in caplog.text

    def test_deterministic(self, fixed_clock):
        gen = _make_generator(fixed_clock)
        assert gen.test("aside", TestType.CSS) == gen.test("aside", TestType.CSS)

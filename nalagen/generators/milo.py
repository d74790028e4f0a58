"""Milo block/feature generator.

Milo tests live beside their page object and spec under ``blocks/<type>/``
or ``features/<path>/`` and use CommonJS specs. Only ``functional``,
``css`` and ``interaction`` have templates; any other test type gets the
functional one.
"""

import logging
from typing import Optional

from nalagen.config.schema import MiloTypesYAML
from nalagen.exceptions import GenerationError
from nalagen.generators.base import BaseGenerator
from nalagen.naming import pascal_case, variable_name
from nalagen.types import MiloCategory, TestType

logger = logging.getLogger(__name__)


def milo_category(value) -> MiloCategory:
    """``block`` or ``feature``.

    Raises:
        GenerationError: any other category
    """
    try:
        return MiloCategory(value)
    except ValueError:
        raise GenerationError(
            f"Category must be either 'block' or 'feature', got {value!r}", details={"category": str(value)},
        ) from None


# ─── Templates ─────────────────────────────────────────────────────────────────

_PAGE_OBJECT_TEMPLATE = """\
{header}export default class {cls} {{
  constructor(page, nth = 0) {{
    this.page = page;

    // Section and {block} locators
    this.section = this.page.locator('.section').nth(nth);
    this.{var} = this.page.locator('.{block}').nth(nth);
    this.foreground = this.{var}.locator('.foreground');

    // Content locators
    this.heading = this.{var}.locator('h2, h3, [role=heading]');
    this.content = this.{var}.locator('.content, .text, .foreground');
    this.button = this.{var}.locator('a.con-button, .button');

    // {block} attributes for verification
    this.attributes = {{
      '{block}': {{
        class: '{block} con-block',
      }},
      '{block}-variant': {{
        class: '{block} variant-class con-block',
      }},
    }};
  }}
}}
"""

_SPEC_TEMPLATE = """\
{header}module.exports = {{
  FeatureName: '{display} {kind}',
  features: [
    {{
      tcid: '0',
      name: '@{display}',
      path: '/drafts/nala/{category}s/{block}/{block}',
      data: {{
        heading: 'Example Heading',
        content: 'Example content text',
      }},
      tags: '@{block} @smoke @regression @milo',
    }},
    {{
      tcid: '1',
      name: '@{display} (variant)',
      path: '/drafts/nala/{category}s/{block}/{block}-variant',
      data: {{
        heading: 'Variant Heading',
        content: 'Variant content text',
      }},
      tags: '@{block} @regression @milo',
    }},
  ],
}};
"""

_TEST_HEAD_TEMPLATE = """\
{header}import {{ expect, test }} from '@playwright/test';
import {{ features }} from './{block}.spec.js';
import {cls} from './{block}.page.js';
import WebUtil from '../../libs/webutil.js';
import {{ runAccessibilityTest }} from '../../libs/accessibility.js';

let {var};
let webUtil;

const miloLibs = process.env.MILO_LIBS || '';

test.describe('{suite}', () => {{
  test.beforeEach(async ({{ page }}) => {{
    {var} = new {cls}(page);
    webUtil = new WebUtil(page);
  }});
"""

_TEST_OPEN_TEMPLATE = """
  test(`${{features[{i}].name}}{suffix},${{features[{i}].tags}}`, async ({{ page, baseURL }}) => {{
    console.info(`[Test Page]: ${{baseURL}}${{features[{i}].path}}${{miloLibs}}`);
{data}
    await test.step('step-1: Go to {page_label}', async () => {{
      await page.goto(`${{baseURL}}${{features[{i}].path}}${{miloLibs}}`);
      await page.waitForLoadState('domcontentloaded');
{url_check}    }});
"""

_ANALYTICS_STEP_TEMPLATE = """
    await test.step('step-3: Verify analytics attributes', async () => {{
{section}      await expect({var}.{var}).toHaveAttribute('daa-lh',
        await webUtil.getBlockDaalh('{block}', 1));
    }});

    await test.step('step-4: Verify the accessibility test on the {subject}', async () => {{
      await runAccessibilityTest({{ page, testScope: {var}.{var} }});
    }});
  }});
"""

_FUNCTIONAL_BODY_TEMPLATE = """
    await test.step('step-2: Verify {display} content/specs', async () => {{
      await expect({var}.{var}).toBeVisible();

      if (await {var}.heading.count() > 0) {{
        await expect({var}.heading).toBeVisible();
        await expect({var}.heading).toContainText(data.heading);
      }}

      if (await {var}.content.count() > 0) {{
        await expect({var}.content).toBeVisible();
        await expect({var}.content).toContainText(data.content);
      }}

      if ({var}.attributes && {var}.attributes['{block}']) {{
        expect(await webUtil.verifyAttributes({var}.{var},
          {var}.attributes['{block}'])).toBeTruthy();
      }}
    }});
"""

_VARIANT_BODY_TEMPLATE = """
    await test.step('step-2: Verify {display} variant content/specs', async () => {{
      await expect({var}.{var}).toBeVisible();

      if ({var}.attributes && {var}.attributes['{block}-variant']) {{
        expect(await webUtil.verifyAttributes({var}.{var},
          {var}.attributes['{block}-variant'])).toBeTruthy();
      }}
    }});
"""

_CSS_BODY_TEMPLATE = """
    await test.step('step-2: Verify {display} CSS properties', async () => {{
      await expect({var}.{var}).toBeVisible();
      await expect({var}.{var}).toHaveCSS('display', 'block');
    }});
"""

_INTERACTION_BODY_TEMPLATE = """
    await test.step('step-2: Test {display} interactions', async () => {{
      await expect({var}.{var}).toBeVisible();

      if (await {var}.button.count() > 0) {{
        await {var}.button.first().click();
      }}
    }});
"""

_SECTION_DAALH = """\
      await expect({var}.section).toHaveAttribute('daa-lh',
        await webUtil.getSectionDaalh(1));
"""


class MiloGenerator(BaseGenerator):
    """Page object, spec, and test templates for Milo blocks and features.

    Args:
        milo_types: display-name catalog; block names missing from it are
            shown as-is
    """

    def __init__(self, milo_types: Optional[MiloTypesYAML] = None, **kwargs):
        super().__init__(**kwargs)
        self.milo_types = milo_types or MiloTypesYAML()

    def display_name(self, block: str, category: MiloCategory = MiloCategory.BLOCK) -> str:
        catalog = self.milo_types.blocks if milo_category(category) == MiloCategory.BLOCK else self.milo_types.features
        entry = catalog.get(block)
        return entry.display_name if entry else block

    def page_object(self, block: str) -> str:
        return _PAGE_OBJECT_TEMPLATE.format(
            header=self.header(), cls=pascal_case(block), block=block, var=variable_name(block),
        )

    def spec(self, block: str, category: MiloCategory = MiloCategory.BLOCK) -> str:
        category = milo_category(category)
        return _SPEC_TEMPLATE.format(
            header=self.header(),
            display=self.display_name(block, category),
            kind="Block" if category == MiloCategory.BLOCK else "Feature",
            category=category.value,
            block=block,
        )

    def test(self, block: str, test_type: TestType, category: MiloCategory = MiloCategory.BLOCK) -> str:
        category = milo_category(category)
        test_type = TestType(test_type)
        display = self.display_name(block, category)
        kind = "Block" if category == MiloCategory.BLOCK else "Feature"
        fields = {"var": variable_name(block), "block": block, "display": display}

        if test_type == TestType.CSS:
            suite = f"Milo {display} CSS test suite"
            body = self._single(0, " - CSS verification", fields, _CSS_BODY_TEMPLATE, f"{display} {kind.lower()}")
        elif test_type == TestType.INTERACTION:
            suite = f"Milo {display} interaction test suite"
            body = self._single(0, " - Interaction test", fields, _INTERACTION_BODY_TEMPLATE, f"{display} {kind.lower()}")
        else:
            if test_type != TestType.FUNCTIONAL:
                logger.info("No Milo template for '%s' tests, using functional", test_type.value)
            suite = f"Milo {display} {kind} test suite"
            body = (
                self._single(0, "", fields, _FUNCTIONAL_BODY_TEMPLATE, f"{display} {kind.lower()}",
                             with_data=True, section=True)
                + self._single(1, "", fields, _VARIANT_BODY_TEMPLATE, f"{display} variant",
                               with_data=True, page_label=f"{display} variant page")
            )

        head = _TEST_HEAD_TEMPLATE.format(
            header=self.header(), block=block, cls=pascal_case(block), var=fields["var"], suite=suite,
        )
        return f"{head}{body}}});\n"

    @staticmethod
    def _single(
        i: int,
        suffix: str,
        fields: dict,
        body_template: str,
        subject: str,
        with_data: bool = False,
        section: bool = False,
        page_label: Optional[str] = None,
    ) -> str:
        url_check = (
            f"      await expect(page).toHaveURL(`${{baseURL}}${{features[{i}].path}}${{miloLibs}}`);\n"
            if with_data else ""
        )
        opening = _TEST_OPEN_TEMPLATE.format(
            i=i,
            suffix=suffix,
            data=f"    const {{ data }} = features[{i}];\n" if with_data else "",
            page_label=page_label or f"{fields['display']} test page",
            url_check=url_check,
        )
        analytics = _ANALYTICS_STEP_TEMPLATE.format(
            section=_SECTION_DAALH.format(**fields) if section else "",
            subject=subject,
            **fields,
        )
        return opening + body_template.format(**fields) + analytics

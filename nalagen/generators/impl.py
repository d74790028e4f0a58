"""Test-implementation generator: the Playwright ``*.test.js`` for one test type.

Each test reads its inputs from ``features[i]`` of the spec file emitted by
SpecGenerator for the same config and test type; both walk plan_features().
"""

from typing import Optional

from nalagen.config.schema import DEFAULT_IMPORT_PATHS
from nalagen.generators.base import BaseGenerator, FeaturePlan, card_class_name, js_string, plan_features
from nalagen.naming import camel_case, capitalize, variable_name
from nalagen.types import ComponentConfig, TestType

_EDITOR_TYPES = (TestType.EDIT, TestType.SAVE, TestType.DISCARD)
_OST_TYPES = (TestType.EDIT, TestType.SAVE)

# interaction type → Playwright locator method
PLAYWRIGHT_ACTIONS = {"click": "click", "hover": "hover", "type": "fill"}

# ─── Templates ─────────────────────────────────────────────────────────────────

_FILE_TEMPLATE = """\
{header}{imports}

{setup}

test.describe('M@S Studio CCD {title} card test suite', () => {{
{tests}
}});
"""

_BEFORE_EACH_TEMPLATE = """\
test.beforeEach(async ({{ page, browserName }}) => {{
    test.slow();
    if (browserName === 'chromium') {{
        await page.setExtraHTTPHeaders({{
            'sec-ch-ua': '"Chromium";v="123", "Not:A-Brand";v="8"',
        }});
    }}
{instances}
}});"""

_TEST_TEMPLATE = """
    // {comment}
    test(`${{features[{i}].name}},${{features[{i}].tags}}`, async ({{
        page,
        baseURL,
    }}) => {{
        const {{ data }} = features[{i}];
        const testPage = `${{baseURL}}${{features[{i}].path}}${{miloLibs}}${{features[{i}].browserParams}}${{data.cardid}}`;
{declarations}        console.info('[Test Page]: ', testPage);
{steps}    }});
"""

_STEP_TEMPLATE = """
        await test.step('step-{n}: {title}', async () => {{
{body}        }});
"""

_GOTO = [
    "await page.goto(testPage);",
    "await page.waitForLoadState('domcontentloaded');",
]

_OPEN_EDITOR = [
    "await expect(await studio.getCard(data.cardid)).toBeVisible();",
    "await (await studio.getCard(data.cardid)).dblclick();",
    "await expect(await editor.panel).toBeVisible();",
]

_CLONE_AND_OPEN = [
    "await studio.cloneCard(data.cardid);",
    "clonedCard = await studio.getCard(data.cardid, 'cloned');",
    "clonedCardID = await clonedCard",
    "    .locator('aem-fragment')",
    "    .getAttribute('fragment');",
    "data.clonedCardID = await clonedCardID;",
    "await expect(await clonedCard).toBeVisible();",
    "await clonedCard.dblclick();",
    "await page.waitForTimeout(2000);",
]

_DISCARD_CHANGES = [
    "await editor.closeEditor.click();",
    "await expect(await studio.confirmationDialog).toBeVisible();",
    "await studio.discardDialog.click();",
    "await expect(await editor.panel).not.toBeVisible();",
]


# ─── Editor scripts ────────────────────────────────────────────────────────────

class _FieldScript:
    """Editor steps for an element backed by a single editor input.

    ``old``/``new`` name keys of the feature's ``data`` object.
    """

    def __init__(
        self,
        field: str,
        label: str,
        old: Optional[str],
        new: str,
        editor_assert: str = "toHaveValue",
        card_assert: str = "toHaveText",
        attribute: Optional[str] = None,
        card_level: bool = False,
    ):
        self.field = field
        self.label = label
        self.old = old
        self.new = new
        self.editor_assert = editor_assert
        self.card_assert = card_assert
        self.attribute = attribute
        self.card_level = card_level

    def change(self) -> list[str]:
        current = f"data.{self.old}" if self.old else "''"
        return [
            f"await expect(await editor.{self.field}).toBeVisible();",
            f"await expect(await editor.{self.field}).{self.editor_assert}({current});",
            f"await editor.{self.field}.fill(data.{self.new});",
        ]

    def in_editor(self) -> list[str]:
        return [f"await expect(await editor.{self.field}).{self.editor_assert}(data.{self.new});"]

    def on_card(self, element: str, card: str, key: Optional[str] = None) -> list[str]:
        key = key or self.new
        if self.attribute:
            target = card if self.card_level else element
            return [f"await expect(await {target}).toHaveAttribute('{self.attribute}', data.{key});"]
        return [f"await expect(await {element}).{self.card_assert}(data.{key});"]

    def saved(self, element: str, card: str) -> list[str]:
        return self.in_editor() + self.on_card(element, card)

    def restored(self, element: str, card: str) -> list[str]:
        if self.old is None:
            target = card if self.card_level else element
            return [f"await expect(await {target}).not.toHaveAttribute('{self.attribute}', data.{self.new});"]
        return self.on_card(element, card, self.old)

    def restored_in_editor(self) -> list[str]:
        if self.old is None:
            return []
        return [f"await expect(await editor.{self.field}).{self.editor_assert}(data.{self.old});"]

    def extra_card_checks(self, element: str) -> list[str]:
        return []


class _PriceScript(_FieldScript):

    def __init__(self):
        super().__init__("prices", "price", "price", "newPrice", editor_assert="toContainText")

    def change(self) -> list[str]:
        return [
            "await expect(await editor.prices).toBeVisible();",
            "await expect(await editor.prices).toContainText(data.price);",
            "await expect(await editor.prices).toContainText(data.strikethroughPrice);",
            "await (await editor.prices.locator(editor.regularPrice)).dblclick();",
            "await expect(await ost.price).toBeVisible();",
            "await expect(await ost.priceUse).toBeVisible();",
            "await expect(await ost.unitCheckbox).toBeVisible();",
            "await ost.unitCheckbox.click();",
            "await ost.priceUse.click();",
        ]

    def in_editor(self) -> list[str]:
        return [
            "await expect(await editor.prices).toContainText(data.newPrice);",
            "await expect(await editor.prices).toContainText(data.newStrikethroughPrice);",
        ]

    def on_card(self, element: str, card: str, key: Optional[str] = None) -> list[str]:
        if key == "price":
            return [
                f"await expect(await {element}).toContainText(data.price);",
                f"await expect(await {element}).toContainText(data.strikethroughPrice);",
            ]
        return [
            f"await expect(await {element}).toContainText(data.newPrice);",
            f"await expect(await {element}).toContainText(data.newStrikethroughPrice);",
        ]

    def saved(self, element: str, card: str) -> list[str]:
        # save fixtures carry only the original prices, which stay a prefix
        return self.on_card(element, card, "price")

    def restored_in_editor(self) -> list[str]:
        return []


class _CtaScript(_FieldScript):

    def __init__(self):
        super().__init__("CTA", "CTA label", "ctaText", "newCtaText", card_assert="toContainText")

    def change(self) -> list[str]:
        return [
            "await expect(await editor.footer.locator(editor.linkEdit)).toBeVisible();",
            "await expect(await editor.CTA).toBeVisible();",
            "await expect(await editor.footer).toContainText(data.ctaText);",
            "await editor.CTA.click();",
            "await editor.footer.locator(editor.linkEdit).click();",
            "await expect(await editor.linkText).toBeVisible();",
            "await expect(await editor.linkSave).toBeVisible();",
            "await expect(await editor.linkText).toHaveValue(data.ctaText);",
            "await editor.linkText.fill(data.newCtaText);",
            "await editor.linkSave.click();",
        ]

    def in_editor(self) -> list[str]:
        return ["await expect(await editor.footer).toContainText(data.newCtaText);"]

    def restored_in_editor(self) -> list[str]:
        return ["await expect(await editor.footer).toContainText(data.ctaText);"]

    def extra_card_checks(self, element: str) -> list[str]:
        return [
            f"await expect(await {element}).toHaveAttribute('data-wcs-osi', data.osi);",
            f"await expect(await {element}).toHaveAttribute('is', 'checkout-button');",
        ]


EDITOR_SCRIPTS = {
    "title": _FieldScript("title", "title", "title", "newTitle"),
    "eyebrow": _FieldScript("subtitle", "eyebrow", "subtitle", "newSubtitle"),
    "description": _FieldScript(
        "description", "description", "description", "newDescription", editor_assert="toContainText",
    ),
    "icon": _FieldScript("iconURL", "mnemonic URL", "iconURL", "newIconURL", attribute="src"),
    "backgroundImage": _FieldScript(
        "backgroundImage", "background URL", None, "newBackgroundURL",
        attribute="background-image", card_level=True,
    ),
    "price": _PriceScript(),
    "cta": _CtaScript(),
}


# ─── Generator ─────────────────────────────────────────────────────────────────

class TestImplGenerator(BaseGenerator):
    """Emits the test file for (config, test type).

    Args:
        import_paths: overrides for studioPage/webUtil/editorPage/ostPage
    """
    __test__ = False

    def __init__(self, import_paths: Optional[dict[str, str]] = None, **kwargs):
        super().__init__(**kwargs)
        self.import_paths = {**DEFAULT_IMPORT_PATHS, **(import_paths or {})}

    def generate(self, config: ComponentConfig, test_type: TestType) -> str:
        test_type = TestType(test_type)
        plans = plan_features(config, test_type)
        tests = "".join(self._test(config, test_type, i, plan) for i, plan in enumerate(plans))
        return _FILE_TEMPLATE.format(
            header=self.header(),
            imports=self.imports(config, test_type),
            setup=self.setup(config, test_type),
            title=capitalize(config.component_type),
            tests=tests,
        )

    def imports(self, config: ComponentConfig, test_type: TestType) -> str:
        cls = card_class_name(config.component_type)
        component = config.component_type
        lines = [
            "import { expect, test } from '@playwright/test';",
            f"import StudioPage from '{self.import_paths['studioPage']}';",
            f"import {cls}Spec from '../specs/{component}_{test_type.value}.spec.js';",
            f"import {cls} from '../{component}.page.js';",
            f"import WebUtil from '{self.import_paths['webUtil']}';",
        ]
        if test_type in _EDITOR_TYPES:
            lines.append(f"import EditorPage from '{self.import_paths['editorPage']}';")
        if test_type in _OST_TYPES:
            lines.append(f"import OSTPage from '{self.import_paths['ostPage']}';")
        return "\n".join(lines)

    def setup(self, config: ComponentConfig, test_type: TestType) -> str:
        cls = card_class_name(config.component_type)
        var = variable_name(config.component_type)
        declarations = ["let studio;", f"let {var};", "let webUtil;"]
        instances = [
            "studio = new StudioPage(page);",
            f"{var} = new {cls}(page);",
            "webUtil = new WebUtil(page);",
        ]
        if test_type in _EDITOR_TYPES:
            declarations.append("let editor;")
            instances.append("editor = new EditorPage(page);")
        if test_type in _OST_TYPES:
            declarations.append("let ost;")
            instances.append("ost = new OSTPage(page);")
        if test_type == TestType.SAVE:
            declarations.append("let clonedCardID;")

        return (
            f"const {{ features }} = {cls}Spec;\n"
            f"const miloLibs = process.env.MILO_LIBS || '';\n"
            f"\n"
            + "\n".join(declarations)
            + "\n\n"
            + _BEFORE_EACH_TEMPLATE.format(instances="\n".join(f"    {line}" for line in instances))
        )

    # ─── Per-feature tests ──────────────────────────────────────────────

    def _test(self, config: ComponentConfig, test_type: TestType, i: int, plan: FeaturePlan) -> str:
        var = variable_name(config.component_type)
        component = config.component_type
        element = f"{var}.{camel_case(plan.element)}"
        declarations = ""

        if test_type == TestType.CSS:
            declarations = f"        const {var}Card = await studio.getCard(data.cardid);\n"
            if plan.element == "card":
                description = f"Validate CSS for {component} card size, background and border color"
                locator = f"{var}Card"
            else:
                description = f"Validate {plan.element} CSS for {component} cards"
                locator = f"{var}Card.locator({element})"
            steps = [
                ("Go to MAS Studio test page", _GOTO),
                (f"Validate {component} card CSS", [
                    f"await expect({var}Card).toBeVisible();",
                    "expect(",
                    f"    await webUtil.verifyCSS({locator}, {var}.cssProp.{plan.element}),",
                    ").toBeTruthy();",
                ]),
            ]

        elif test_type in (TestType.FUNCTIONAL, TestType.INTERACTION):
            declarations = f"        const {var}Card = await studio.getCard(data.cardid);\n"
            description = f"Test {plan.interaction} interaction on {plan.element}"
            steps = [
                ("Go to MAS Studio test page", _GOTO),
                (f"Perform {plan.interaction} on {plan.element}", [
                    f"await expect({var}Card).toBeVisible();",
                    f"await {var}Card.locator({element}).{self._action(plan)};",
                ]),
            ]

        else:
            script = EDITOR_SCRIPTS[plan.element]
            card = "studio.getCard(data.cardid)"
            if test_type == TestType.EDIT:
                description = f"Validate edit {script.label} field for {component} card in mas studio"
                variant = js_string(config.metadata.variant or f"ccd-{component}")
                steps = [
                    ("Go to MAS Studio test page", _GOTO),
                    ("Open card editor", [
                        f"await expect(await {card}).toBeVisible();",
                        f"await expect(await {card}).toHaveAttribute('variant', '{variant}');",
                        f"await (await {card}).dblclick();",
                        "await expect(await editor.panel).toBeVisible();",
                    ]),
                    (f"Edit {script.label} field", script.change()),
                    (f"Validate edited {script.label} field in Editor panel", script.in_editor()),
                    (f"Validate edited {script.label} field on the card",
                     script.on_card(element, card) + script.extra_card_checks(element)),
                ]
            elif test_type == TestType.SAVE:
                description = f"Validate saving card after editing card {script.label}"
                declarations = "        let clonedCard;\n"
                steps = [
                    ("Go to MAS Studio test page", _GOTO),
                    ("Clone card and open editor", _CLONE_AND_OPEN),
                    (f"Edit {script.label} and save card", script.change() + ["await studio.saveCard();"]),
                    (f"Validate edited card {script.label}",
                     script.saved(f"clonedCard.locator({element})", "clonedCard")),
                ]
            else:
                description = f"Validate discard edited {script.label} for {component} card in mas studio"
                steps = [
                    ("Go to MAS Studio test page", _GOTO),
                    ("Open card editor", _OPEN_EDITOR),
                    (f"Edit {script.label} field", script.change()),
                    ("Close the editor and verify discard is triggered", _DISCARD_CHANGES),
                    ("Verify there is no changes of the card",
                     script.restored(element, card) + _OPEN_EDITOR[1:] + script.restored_in_editor()),
                ]

        return _TEST_TEMPLATE.format(
            comment=f"{plan.name(component, test_type)} - {description}",
            i=i,
            declarations=declarations,
            steps="".join(self._step(n, title, body) for n, (title, body) in enumerate(steps, start=1)),
        )

    @staticmethod
    def _step(n: int, title: str, body: list[str]) -> str:
        return _STEP_TEMPLATE.format(
            n=n,
            title=js_string(title),
            body="".join(f"            {line}\n" for line in body),
        )

    @staticmethod
    def _action(plan: FeaturePlan) -> str:
        action = PLAYWRIGHT_ACTIONS.get(plan.interaction or "", "click")
        if action == "fill":
            return f"fill('{js_string(plan.value or '')}')"
        return f"{action}()"

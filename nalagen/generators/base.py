"""Shared pieces of the CCD card generators.

The spec generator and the test-implementation generator both walk the
same feature plan, so ``features[i]`` in a generated test always lines up
with the i-th entry of the matching spec file.
"""

from datetime import date
from typing import Callable, NamedTuple, Optional

from nalagen.naming import pascal_case, title_words
from nalagen.types import ComponentConfig, TestType

GENERATED_BY = "nalagen"

DEFAULT_CARD_ID = "206a8742-0289-4196-92d4-ced99ec4191e"
DEFAULT_SAVE_CARD_ID = "cc85b026-240a-4280-ab41-7618e65daac4"
DEFAULT_PATH = "/studio.html"
DEFAULT_BROWSER_PARAMS = "#query="

# Elements the studio editor can change, in the order tests are emitted.
EDITABLE_ELEMENTS = ("title", "eyebrow", "description", "icon", "backgroundImage", "price", "cta")

_PHOTOSHOP_ICON = "https://www.adobe.com/content/dam/shared/images/product-icons/svg/photoshop.svg"
_ILLUSTRATOR_ICON = "https://www.adobe.com/content/dam/shared/images/product-icons/svg/illustrator.svg"
_BACKGROUND = (
    "https://main--milo--adobecom.aem.page/assets/img/commerce/"
    "media_1d63dab9ee1edbf371d6f0548516c9e12b3ea3ff4.png"
)

FEATURE_SLUGS = {
    TestType.EDIT: {
        "title": "title",
        "eyebrow": "eyebrow",
        "description": "description",
        "icon": "mnemonic",
        "backgroundImage": "background",
        "price": "price",
        "cta": "cta-label",
    },
    TestType.SAVE: {
        "title": "edited-title",
        "eyebrow": "edited-eyebrow",
        "description": "edited-description",
        "icon": "edited-mnemonic",
        "backgroundImage": "edited-image",
        "price": "edited-price",
        "cta": "edited-cta-label",
    },
    TestType.DISCARD: {
        "title": "edited-title",
        "eyebrow": "edited-eyebrow",
        "description": "edited-description",
        "icon": "edited-mnemonic",
        "backgroundImage": "edited-background",
        "price": "edited-price",
        "cta": "edited-cta-label",
    },
}

_EDIT_DATA = {
    "title": {"title": "Automation Test Card", "newTitle": "Change title"},
    "eyebrow": {"subtitle": "do not edit", "newSubtitle": "Change subtitle"},
    "description": {
        "description": "MAS repo validation card for Nala tests",
        "newDescription": "New Test Description",
    },
    "icon": {"iconURL": _PHOTOSHOP_ICON, "newIconURL": _ILLUSTRATOR_ICON},
    "backgroundImage": {"newBackgroundURL": _BACKGROUND},
    "price": {
        "price": "US$17.24/mo",
        "strikethroughPrice": "US$34.49/mo",
        "newPrice": "US$17.24/moper license",
        "newStrikethroughPrice": "US$34.49/moper license",
    },
    "cta": {
        "osi": "A1xn6EL4pK93bWjM8flffQpfEL-bnvtoQKQAvkx574M",
        "ctaText": "Buy now",
        "newCtaText": "Buy now 2",
    },
}

TEST_DATA = {
    TestType.EDIT: _EDIT_DATA,
    TestType.SAVE: {
        **_EDIT_DATA,
        "title": {"title": "Field Edit & Save", "newTitle": "Cloned Field Edit"},
        "eyebrow": {"subtitle": "do not edit", "newSubtitle": "New Subtitle"},
        "price": {"price": "US$17.24/mo", "strikethroughPrice": "US$34.49/mo"},
        "cta": {"ctaText": "Buy now", "newCtaText": "Buy now 2"},
    },
    TestType.DISCARD: {
        **_EDIT_DATA,
        "cta": {"ctaText": "Buy now", "newCtaText": "Buy now 2"},
    },
}


class FeaturePlan(NamedTuple):
    """One feature entry: which element it covers and what it is called."""
    element: str
    slug: str
    data: dict
    interaction: Optional[str] = None
    value: Optional[str] = None         # text for "type" interactions

    def name(self, component_type: str, test_type: TestType) -> str:
        if self.interaction is not None:
            return f"@studio-{component_type}-{self.slug}"
        return f"@studio-{component_type}-{test_type.value}-{self.slug}"


def plan_features(config: ComponentConfig, test_type: TestType) -> list[FeaturePlan]:
    """Ordered feature plan for ``config`` under ``test_type``."""
    test_type = TestType(test_type)
    if test_type == TestType.CSS:
        plans = [FeaturePlan("card", "card", {})]
        plans.extend(FeaturePlan(name, name, {}) for name, _el in config.populated())
        return plans

    if test_type in (TestType.FUNCTIONAL, TestType.INTERACTION):
        return [
            FeaturePlan(name, f"{interaction.type}-{name}", {}, interaction.type, interaction.value)
            for name, element in config.populated()
            for interaction in element.interactions
        ]

    slugs, data = FEATURE_SLUGS[test_type], TEST_DATA[test_type]
    return [
        FeaturePlan(name, slugs[name], dict(data[name]))
        for name in editable_elements(config)
    ]


def editable_elements(config: ComponentConfig) -> list[str]:
    return [name for name in EDITABLE_ELEMENTS if config.elements.get(name) is not None]


def js_string(value: str) -> str:
    """Body of a single-quoted JS string literal."""
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


def card_class_name(component_type: str) -> str:
    """``try-buy-widget`` → ``CCDTryBuyWidget``."""
    return f"CCD{pascal_case(component_type)}"


def feature_title(component_type: str) -> str:
    return f"M@S Studio CCD {title_words(component_type)}"


class BaseGenerator:
    """Holds the one impure input every generator shares: today's date.

    Args:
        clock: returns the date written into the header comment
        stamp: emit the ``// Generated by`` header at all
    """

    def __init__(self, clock: Callable[[], date] = date.today, stamp: bool = True):
        self._clock = clock
        self.stamp = stamp

    def header(self) -> str:
        if not self.stamp:
            return ""
        return f"// Generated by {GENERATED_BY} on {self._clock().isoformat()}\n"

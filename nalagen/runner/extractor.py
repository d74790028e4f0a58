"""Live property extraction from a rendered card in Studio.

PlaywrightExtractor opens the card in Chromium and reads, for the card and
each known element, a selector, the slot name, the text, and a fixed set
of computed CSS properties.
"""

import logging
from typing import Optional, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from nalagen.config import config
from nalagen.exceptions import ExtractionError
from nalagen.generators.base import feature_title
from nalagen.inputs import validate_branch, validate_run_argument
from nalagen.types import ComponentConfig, ComponentMetadata, ElementConfig, ExtractedElement

logger = logging.getLogger(__name__)

AUTH_HOST = "auth.services.adobe.com"
AUTH_TIMEOUT_MS = 60000
SETTLE_MS = 5000

ELEMENT_QUERIES = {
    "title": '[slot*="heading"]',
    "eyebrow": '[slot*="detail"], [slot*="eyebrow"], [slot*="body-xxs-serif"]',
    "description": '[slot*="body-xs"], [slot*="body-s"]',
    "price": '[data-template="price"]',
    "cta": '[slot="footer"] a, [slot="footer"] button, [slot="cta"] button',
    "icon": "merch-icon",
    "backgroundImage": '[slot="media"] img, [slot="image"] img',
}

CSS_PROPERTIES = (
    "color", "font-size", "font-weight", "line-height",
    "background-color", "border-color", "width", "height",
)

# Runs in the page; receives [cardId, queries, cssProperties].
_EXTRACT_SCRIPT = """
([cardId, queries, cssProperties]) => {
    const describe = (element) => {
        if (!element) return null;
        const styles = window.getComputedStyle(element);
        const css = {};
        for (const prop of cssProperties) css[prop] = styles.getPropertyValue(prop);
        const classes = typeof element.className === 'string' && element.className.trim()
            ? '.' + element.className.trim().split(/\\s+/).join('.')
            : '';
        return {
            selector: element.tagName.toLowerCase() + (element.id ? '#' + element.id : '') + classes,
            slot: element.getAttribute('slot'),
            text: element.textContent ? element.textContent.trim() : null,
            cssProperties: css,
        };
    };
    const card = document.querySelector(`[data-studio-id="${cardId}"]`)
        || document.querySelector('merch-card');
    if (!card) return { error: 'Card not found' };
    const result = { card: describe(card) };
    for (const [name, query] of Object.entries(queries)) {
        result[name] = describe(card.querySelector(query));
    }
    return result;
}
"""


class PropertyExtractor(Protocol):

    async def extract(self, component_id: str, branch: str, milolibs: str) -> dict[str, ExtractedElement]:
        ...


def studio_url(component_id: str, branch: str, milolibs: str) -> str:
    """Studio content page filtered to one card."""
    if milolibs == "local":
        base = config.studio_local_url
    else:
        base = config.studio_branch_url.format(branch=branch)
    return f"{base}/studio.html?milolibs={milolibs}#page=content&path=nala&query={component_id}"


class PlaywrightExtractor:
    """Extracts card properties with a real browser.

    Args:
        headless: run Chromium without a window
        timeout_ms: navigation timeout
    """

    def __init__(self, headless: Optional[bool] = None, timeout_ms: Optional[int] = None):
        self.headless = config.browser_headless if headless is None else headless
        self.timeout_ms = timeout_ms or config.extraction_timeout_ms

    async def extract(self, component_id: str, branch: str, milolibs: str) -> dict[str, ExtractedElement]:
        """Returns populated elements keyed by name, ``card`` first.

        Raises:
            ExtractionError: the browser failed or the card is not on the page
        """
        validate_run_argument(component_id, field="component_id")
        validate_branch(branch)
        validate_run_argument(milolibs, field="milolibs")
        url = studio_url(component_id, branch, milolibs)
        logger.info("Extracting %s from %s", component_id, url)

        try:
            raw = await self._evaluate(url, component_id, ignore_https_errors=milolibs == "local")
        except PlaywrightError as exc:
            raise ExtractionError(
                f"Browser extraction failed: {exc}", component_id=component_id, details={"url": url},
            ) from exc

        if not raw or raw.get("error"):
            message = (raw or {}).get("error") or "No data returned"
            raise ExtractionError(
                f"Failed to extract properties: {message}", component_id=component_id, details={"url": url},
            )
        return parse_extraction(raw)

    async def _evaluate(self, url: str, component_id: str, ignore_https_errors: bool) -> dict:
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=self.headless)
            try:
                context = await browser.new_context(
                    ignore_https_errors=ignore_https_errors,
                    permissions=["clipboard-read", "clipboard-write"],
                )
                page = await context.new_page()
                await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
                if AUTH_HOST in page.url:
                    logger.warning("Authentication required; waiting for manual sign-in")
                    await page.wait_for_url(
                        lambda u: AUTH_HOST not in u, wait_until="networkidle", timeout=AUTH_TIMEOUT_MS,
                    )
                await page.wait_for_timeout(SETTLE_MS)
                return await page.evaluate(
                    _EXTRACT_SCRIPT, [component_id, ELEMENT_QUERIES, list(CSS_PROPERTIES)],
                )
            finally:
                await browser.close()


def parse_extraction(raw: dict) -> dict[str, ExtractedElement]:
    """Drop elements the card does not have."""
    return {
        name: ExtractedElement.model_validate(data)
        for name, data in raw.items()
        if isinstance(data, dict)
    }


def to_component_config(
    component_type: str,
    component_id: str,
    extracted: dict[str, ExtractedElement],
    milolibs: Optional[str] = None,
) -> ComponentConfig:
    """Generation input built from a live extraction.

    Slot selectors are preferred; the card's own CSS becomes the ``card``
    entry of the card-level CSS map.
    """
    elements: dict[str, Optional[ElementConfig]] = {}
    for name, element in extracted.items():
        if name == "card":
            continue
        elements[name] = ElementConfig(
            selector=f'[slot="{element.slot}"]' if element.slot else element.selector,
            expected_text=element.text or None,
            css_properties={k: v for k, v in element.css_properties.items() if v and v != "none"},
        )

    card = extracted.get("card")
    card_css = {k: v for k, v in card.css_properties.items() if v and v != "none"} if card else {}
    return ComponentConfig(
        component_type=component_type,
        component_id=component_id,
        elements=elements,
        css_properties={"card": card_css} if card_css else {},
        metadata=ComponentMetadata(milolibs=milolibs),
        test_suite=feature_title(component_type),
    )

"""Rewrite a generated page object from freshly extracted properties.

Only two kinds of line are touched: existing ``this.<name> = page.locator(...)``
assignments and the ``this.cssProp = {...};`` literal. Locators for elements
the page object does not already declare are left alone.
"""

import logging
import re
from pathlib import Path

from nalagen.generators.base import js_string
from nalagen.generators.page_object import CSS_PROP_ATTRIBUTE, format_css_properties
from nalagen.naming import camel_case
from nalagen.types import ExtractedElement

logger = logging.getLogger(__name__)

_CSS_PROP_START = re.compile(rf"this\.{CSS_PROP_ATTRIBUTE}\s*=\s*\{{")
_IGNORED_CSS_VALUES = ("", "none")
# A single- or double-quoted JS string literal.
_LOCATOR_ARGUMENT = r"""(?:'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")"""


def patch_selector(extracted: ExtractedElement) -> str:
    """Slot attribute selector when the element has a slot."""
    if extracted.slot:
        return f'[slot="{extracted.slot}"]'
    return extracted.selector


def patch_css(extracted: dict[str, ExtractedElement]) -> dict[str, dict[str, str]]:
    """Per-element CSS with empty and ``none`` values dropped."""
    css: dict[str, dict[str, str]] = {}
    for name, element in extracted.items():
        values = {
            prop: value for prop, value in element.css_properties.items()
            if value and value not in _IGNORED_CSS_VALUES
        }
        if values:
            css[name] = values
    return css


def replace_selector(source: str, name: str, selector: str) -> tuple[str, bool]:
    key = re.escape(camel_case(name))
    pattern = re.compile(rf"this\.{key}\s*=\s*page\.locator\({_LOCATOR_ARGUMENT}\);")
    replacement = f"this.{camel_case(name)} = page.locator('{js_string(selector)}');"
    patched, count = pattern.subn(lambda _: replacement, source, count=1)
    return patched, bool(count)


def replace_css_literal(source: str, css: dict[str, dict[str, str]]) -> tuple[str, bool]:
    """Swap the whole ``cssProp`` object literal, nested braces included."""
    match = _CSS_PROP_START.search(source)
    if not match:
        return source, False
    end = _closing_brace(source, match.end() - 1)
    if end is None or not source[end + 1:].lstrip(" \t").startswith(";"):
        logger.warning("Unbalanced %s literal; leaving it untouched", CSS_PROP_ATTRIBUTE)
        return source, False
    literal = format_css_properties(css)
    return source[:match.start()] + f"this.{CSS_PROP_ATTRIBUTE} = {literal}" + source[end + 1:], True


def _closing_brace(source: str, start: int):
    depth = 0
    quote = None
    escaped = False
    for index in range(start, len(source)):
        char = source[index]
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in "'\"":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def patch_source(source: str, extracted: dict[str, ExtractedElement]) -> tuple[str, list[str]]:
    """Apply extracted selectors and CSS to page-object source.

    Returns the new source and a description of each change made.
    """
    applied = []
    for name, element in extracted.items():
        source, changed = replace_selector(source, name, patch_selector(element))
        if changed:
            applied.append(f"selector:{camel_case(name)}")

    css = patch_css(extracted)
    if css:
        source, changed = replace_css_literal(source, css)
        if changed:
            applied.append(f"css:{','.join(css)}")
    return source, applied


def patch_page_object(path: Path, extracted: dict[str, ExtractedElement]) -> list[str]:
    """Rewrite the page object at ``path`` in place.

    Raises:
        OSError: the file could not be read or written
    """
    path = Path(path)
    original = path.read_text(encoding="utf-8")
    patched, applied = patch_source(original, extracted)
    if patched != original:
        path.write_text(patched, encoding="utf-8")
        logger.info("Patched %s: %s", path, ", ".join(applied))
    else:
        logger.info("Nothing to patch in %s", path)
    return applied

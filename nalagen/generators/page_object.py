"""Page-object generator: one ES class with a locator per card element."""

import json

from nalagen.generators.base import BaseGenerator, card_class_name, js_string
from nalagen.naming import camel_case
from nalagen.types import ComponentConfig

# Keys the patcher rewrites in place; keep them in sync with runner.patcher.
CSS_PROP_ATTRIBUTE = "cssProp"


class PageObjectGenerator(BaseGenerator):

    def class_name(self, component_type: str) -> str:
        return f"{card_class_name(component_type)}Page"

    def generate(self, config: ComponentConfig) -> str:
        selectors = "\n".join(
            self.selector_line(name, element.selector)
            for name, element in config.populated()
        )
        return (
            f"{self.header()}"
            f"export default class {self.class_name(config.component_type)} {{\n"
            f"    constructor(page) {{\n"
            f"        this.page = page;\n"
            f"\n"
            f"{selectors}\n"
            f"\n"
            f"        // {config.component_type} card properties:\n"
            f"        this.{CSS_PROP_ATTRIBUTE} = {format_css_properties(css_properties(config))};\n"
            f"    }}\n"
            f"}}\n"
        )

    @staticmethod
    def selector_line(name: str, selector: str) -> str:
        return f"        this.{camel_case(name)} = page.locator('{js_string(selector)}');"


def css_properties(config: ComponentConfig) -> dict[str, dict[str, str]]:
    """``card`` CSS (when any card-level CSS is configured) then per-element CSS."""
    props: dict[str, dict[str, str]] = {}
    if config.css_properties:
        props["card"] = dict(config.css_properties.get("card", {}))
    for name, element in config.populated():
        if element.css_properties:
            props[name] = dict(element.css_properties)
    return props


def format_css_properties(props: dict) -> str:
    """Indented object literal with single-quoted strings."""
    return json.dumps(props, indent=12).replace('"', "'")

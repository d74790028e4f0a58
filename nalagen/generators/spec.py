"""Spec generator: the ``features`` table a generated test file iterates."""

from nalagen.generators.base import (
    DEFAULT_BROWSER_PARAMS,
    DEFAULT_CARD_ID,
    DEFAULT_PATH,
    DEFAULT_SAVE_CARD_ID,
    BaseGenerator,
    FeaturePlan,
    feature_title,
    js_string,
    plan_features,
)
from nalagen.types import ComponentConfig, TestType


class SpecGenerator(BaseGenerator):

    def generate(self, config: ComponentConfig, test_type: TestType) -> str:
        test_type = TestType(test_type)
        features = "".join(
            self._feature(config, test_type, tcid, plan)
            for tcid, plan in enumerate(plan_features(config, test_type))
        )
        return (
            f"{self.header()}"
            f"export default {{\n"
            f"    FeatureName: '{js_string(feature_title(config.component_type))}',\n"
            f"    features: [{features}\n"
            f"    ],\n"
            f"}};\n"
        )

    def tags(self, config: ComponentConfig, test_type: TestType) -> str:
        """``@mas-studio @ccd @ccd-<type> @ccd-<type>-<testType>`` (+ ``@ccd-css``)."""
        component = config.component_type
        # interaction features are tagged as functional ones
        tag_type = TestType.FUNCTIONAL if test_type == TestType.INTERACTION else test_type
        tags = ["@mas-studio", "@ccd", f"@ccd-{component}", f"@ccd-{component}-{tag_type.value}"]
        if test_type == TestType.CSS:
            tags.append("@ccd-css")
        for extra in config.metadata.tags:
            if extra not in tags:
                tags.append(extra)
        return " ".join(tags)

    def _feature(self, config: ComponentConfig, test_type: TestType, tcid: int, plan: FeaturePlan) -> str:
        default_id = DEFAULT_SAVE_CARD_ID if test_type == TestType.SAVE else DEFAULT_CARD_ID
        card_id = config.component_id or default_id
        path = config.metadata.path or DEFAULT_PATH
        browser_params = config.metadata.browser_params or DEFAULT_BROWSER_PARAMS
        data_lines = "".join(
            f"                {key}: '{js_string(value)}',\n" for key, value in plan.data.items()
        )
        return (
            f"\n"
            f"        {{\n"
            f"            tcid: '{tcid}',\n"
            f"            name: '{plan.name(config.component_type, test_type)}',\n"
            f"            path: '{js_string(path)}',\n"
            f"            data: {{\n"
            f"                cardid: '{js_string(card_id)}',\n"
            f"{data_lines}"
            f"            }},\n"
            f"            browserParams: '{js_string(browser_params)}',\n"
            f"            tags: '{js_string(self.tags(config, test_type))}',\n"
            f"        }},"
        )

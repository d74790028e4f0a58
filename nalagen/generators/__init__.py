"""Template generators: page objects, specs, test implementations, Milo blocks."""

from nalagen.generators.base import BaseGenerator, FeaturePlan, plan_features
from nalagen.generators.impl import TestImplGenerator
from nalagen.generators.milo import MiloGenerator
from nalagen.generators.page_object import PageObjectGenerator
from nalagen.generators.spec import SpecGenerator

__all__ = [
    "BaseGenerator",
    "FeaturePlan",
    "MiloGenerator",
    "PageObjectGenerator",
    "SpecGenerator",
    "TestImplGenerator",
    "plan_features",
]

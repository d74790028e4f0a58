"""Generation pipeline: resolve a variant, render its files, write them.

Usage:
    registry = VariantRegistry(settings)
    registry.initialize()
    builder = SuiteBuilder(settings, registry)
    results = builder.generate(config, TestType.CSS)
"""

import logging
from typing import Iterable, Optional

from nalagen.config.loader import load_milo_types
from nalagen.config.schema import ProjectSettings
from nalagen.generators.impl import TestImplGenerator
from nalagen.generators.milo import MiloGenerator
from nalagen.generators.page_object import PageObjectGenerator
from nalagen.generators.spec import SpecGenerator
from nalagen.output.paths import ArtifactPaths, PathResolver
from nalagen.output.writer import FileOutput
from nalagen.types import (
    ArtifactKind,
    ComponentConfig,
    GeneratedArtifact,
    MiloCategory,
    TestType,
    WriteResult,
)
from nalagen.variants.registry import VariantRegistry

logger = logging.getLogger(__name__)


class SuiteBuilder:
    """Ties the registry, generators, path resolver, and file output together."""

    def __init__(
        self,
        settings: ProjectSettings,
        registry: VariantRegistry,
        output: Optional[FileOutput] = None,
        page_objects: Optional[PageObjectGenerator] = None,
        specs: Optional[SpecGenerator] = None,
        tests: Optional[TestImplGenerator] = None,
        milo: Optional[MiloGenerator] = None,
    ):
        self.settings = settings
        self.registry = registry
        self.paths = PathResolver(settings)
        self.output = output or FileOutput()
        self.page_objects = page_objects or PageObjectGenerator()
        self.specs = specs or SpecGenerator()
        self.tests = tests or TestImplGenerator(import_paths=settings.import_paths)
        self.milo = milo or MiloGenerator(milo_types=load_milo_types())

    def resolve(self, variant: str, test_type: TestType) -> ArtifactPaths:
        """Output paths for ``variant``; unknown variants are accepted."""
        self.registry.is_valid(variant)
        return self.paths.card_paths(variant, self.registry.surface_for(variant), test_type)

    def artifacts(self, config: ComponentConfig, test_type: TestType) -> list[GeneratedArtifact]:
        test_type = TestType(test_type)
        paths = self.resolve(config.component_type, test_type)
        return [
            GeneratedArtifact(
                kind=ArtifactKind.PAGE_OBJECT,
                path=str(paths.page_object),
                content=self.page_objects.generate(config),
            ),
            GeneratedArtifact(
                kind=ArtifactKind.SPEC,
                path=str(paths.spec),
                content=self.specs.generate(config, test_type),
            ),
            GeneratedArtifact(
                kind=ArtifactKind.TEST,
                path=str(paths.test),
                content=self.tests.generate(config, test_type),
            ),
        ]

    def generate(self, config: ComponentConfig, test_type: TestType) -> list[WriteResult]:
        """Write page object, spec, and test for one test type."""
        results = self.output.write_all(self.artifacts(config, test_type))
        logger.info(
            "Generated %s/%s: %d of %d files written",
            config.component_type, TestType(test_type).value,
            sum(r.success for r in results), len(results),
        )
        return results

    def generate_suite(
        self,
        config: ComponentConfig,
        test_types: Optional[Iterable[TestType]] = None,
    ) -> dict[TestType, list[WriteResult]]:
        """Every requested test type; the page object is written once."""
        test_types = [TestType(t) for t in (test_types or config.test_types)]
        results: dict[TestType, list[WriteResult]] = {}
        page_written = False
        for test_type in test_types:
            artifacts = self.artifacts(config, test_type)
            if page_written:
                artifacts = [a for a in artifacts if a.kind != ArtifactKind.PAGE_OBJECT]
            results[test_type] = self.output.write_all(artifacts)
            page_written = True
        return results

    def milo_artifacts(
        self,
        block: str,
        test_type: TestType,
        category: MiloCategory = MiloCategory.BLOCK,
    ) -> list[GeneratedArtifact]:
        paths = self.paths.milo_paths(block, category)
        name = paths.page_object.name[: -len(".page.js")]
        return [
            GeneratedArtifact(
                kind=ArtifactKind.PAGE_OBJECT, path=str(paths.page_object), content=self.milo.page_object(name),
            ),
            GeneratedArtifact(
                kind=ArtifactKind.SPEC, path=str(paths.spec), content=self.milo.spec(name, category),
            ),
            GeneratedArtifact(
                kind=ArtifactKind.TEST, path=str(paths.test), content=self.milo.test(name, test_type, category),
            ),
        ]

    def generate_milo(
        self,
        block: str,
        test_type: TestType,
        category: MiloCategory = MiloCategory.BLOCK,
    ) -> list[WriteResult]:
        return self.output.write_all(self.milo_artifacts(block, test_type, category))

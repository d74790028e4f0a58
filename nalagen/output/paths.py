"""Where generated files go.

MAS card layout, rooted at ``<project>/<testOutputPath>/studio``::

    {surface}/{variant}/{variant}.page.js
    {surface}/{variant}/specs/{variant}_{testType}.spec.js
    {surface}/{variant}/tests/{variant}_{testType}.test.js

Milo layout, rooted at ``<project>/<testOutputPath>``::

    blocks/{type}/{type}.page.js|.spec.js|.test.js
    features/{path/parts}/{last}.page.js|.spec.js|.test.js

The external test tooling finds tests by these paths.
"""

from pathlib import Path
from typing import NamedTuple

from nalagen.config.schema import ProjectSettings
from nalagen.exceptions import InvalidInputError
from nalagen.generators.milo import milo_category
from nalagen.types import MiloCategory, ProjectType, TestType

STUDIO_DIR = "studio"


class ArtifactPaths(NamedTuple):
    directory: Path
    page_object: Path
    spec: Path
    test: Path


class PathResolver:

    def __init__(self, settings: ProjectSettings):
        self.settings = settings

    @property
    def studio_root(self) -> Path:
        return self.settings.output_root / STUDIO_DIR

    def card_directory(self, variant: str, surface: str) -> Path:
        return self.studio_root / surface / variant

    def card_paths(self, variant: str, surface: str, test_type: TestType) -> ArtifactPaths:
        test_type = TestType(test_type).value
        directory = self.card_directory(variant, surface)
        return ArtifactPaths(
            directory=directory,
            page_object=directory / f"{variant}.page.js",
            spec=directory / "specs" / f"{variant}_{test_type}.spec.js",
            test=directory / "tests" / f"{variant}_{test_type}.test.js",
        )

    def milo_paths(self, block: str, category: MiloCategory = MiloCategory.BLOCK) -> ArtifactPaths:
        """Paths for a Milo block or (possibly nested) feature.

        Only the named ``/``-separated parts of ``block`` are joined, so the
        result always stays under the output root.

        Raises:
            InvalidInputError: not a Milo project, or no usable name in ``block``
            GenerationError: unknown category
        """
        if self.settings.type != ProjectType.MILO:
            raise InvalidInputError(
                f"Milo layout requested for a '{self.settings.type.value}' project",
                field="project",
                value=self.settings.name or "",
            )
        category = milo_category(category)
        parts = [p for p in block.split("/") if p not in ("", ".", "..")]
        if not parts:
            raise InvalidInputError(f"No block name in {block!r}", field="block", value=block)
        directory = self.settings.output_root.joinpath(f"{category.value}s", *parts)
        name = parts[-1]
        return ArtifactPaths(
            directory=directory,
            page_object=directory / f"{name}.page.js",
            spec=directory / f"{name}.spec.js",
            test=directory / f"{name}.test.js",
        )

"""Structural checks on generated files before they are run.

These are substring and line-shape checks, not a JavaScript parser: they
catch truncated or hand-mangled output, nothing more.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from nalagen.output.paths import ArtifactPaths
from nalagen.types import ArtifactKind, FileCheck, ProjectType, ValidationReport

logger = logging.getLogger(__name__)

STUDIO_TEST_IMPORTS = ("expect", "test", "@playwright/test", "StudioPage", "WebUtil")
MILO_TEST_IMPORTS = ("expect", "test", "@playwright/test", "WebUtil")

_IMPORT_LINE = re.compile(r"""^import\s+.*from\s+['"][^'"]+['"];?$""", re.MULTILINE)
_EXPORT_LINE = re.compile(r"^export\s+(default\s+)?", re.MULTILINE)


def kind_for_path(path: Path) -> Optional[ArtifactKind]:
    name = Path(path).name
    if name.endswith(".page.js"):
        return ArtifactKind.PAGE_OBJECT
    if name.endswith(".spec.js"):
        return ArtifactKind.SPEC
    if name.endswith(".test.js"):
        return ArtifactKind.TEST
    return None


def check_page_object(content: str) -> tuple[list[str], list[str]]:
    errors = []
    if "export default class" not in content:
        errors.append("Page object should export a default class")
    if not re.search(r"constructor\(page\b", content):
        errors.append("Page object should have constructor(page)")
    return errors, []


def check_spec(content: str) -> tuple[list[str], list[str]]:
    errors = []
    if "export default" not in content and "module.exports" not in content:
        errors.append("Spec file should have default export")
    if "FeatureName" not in content:
        errors.append("Spec file should have FeatureName")
    if "features" not in content:
        errors.append("Spec file should have features array")
    return errors, []


def check_test(content: str, required_imports: Iterable[str] = STUDIO_TEST_IMPORTS) -> tuple[list[str], list[str]]:
    errors = [f"Missing required import: {name}" for name in required_imports if name not in content]
    warnings = []

    if "test.describe" not in content:
        errors.append("Missing test.describe block")
    if "test.beforeEach" not in content:
        warnings.append("Missing test.beforeEach setup")
    if "test(`" not in content:
        errors.append("No test cases found")
    if "test(" in content and "async" not in content:
        warnings.append("Tests should be async for Playwright")
    if ".page" not in content and "Page(" not in content:
        warnings.append("No page object usage detected")

    if "import " in content and not _IMPORT_LINE.search(content):
        warnings.append("Import statements may have syntax issues")
    if "export " in content and not _EXPORT_LINE.search(content):
        warnings.append("Export statements may have syntax issues")
    return errors, warnings


def validate_file(
    path: Path,
    kind: Optional[ArtifactKind] = None,
    required_imports: Iterable[str] = STUDIO_TEST_IMPORTS,
) -> FileCheck:
    """Check one file; the kind is inferred from its name when not given."""
    path = Path(path)
    kind = kind or kind_for_path(path)
    if kind is None:
        return FileCheck(
            path=str(path), kind=ArtifactKind.TEST,
            errors=[f"Unrecognised file name (expected .page.js, .spec.js or .test.js): {path.name}"],
        )
    if not path.exists():
        return FileCheck(path=str(path), kind=kind, errors=[f"Missing {kind.value} file"])
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Could not read %s: %s", path, exc)
        return FileCheck(path=str(path), kind=kind, errors=[f"Could not read file: {exc}"])

    if kind == ArtifactKind.PAGE_OBJECT:
        errors, warnings = check_page_object(content)
    elif kind == ArtifactKind.SPEC:
        errors, warnings = check_spec(content)
    else:
        errors, warnings = check_test(content, required_imports)
    return FileCheck(path=str(path), kind=kind, errors=errors, warnings=warnings)


def validate_test_file(path: Path, required_imports: Iterable[str] = STUDIO_TEST_IMPORTS) -> ValidationReport:
    return ValidationReport(files=[validate_file(path, ArtifactKind.TEST, required_imports)])


def validate_generated_files(
    paths: ArtifactPaths,
    project_type: ProjectType = ProjectType.MAS,
) -> ValidationReport:
    """Page object, spec, and test for one generated variant or block."""
    required = MILO_TEST_IMPORTS if project_type == ProjectType.MILO else STUDIO_TEST_IMPORTS
    report = ValidationReport(files=[
        validate_file(paths.page_object, ArtifactKind.PAGE_OBJECT),
        validate_file(paths.spec, ArtifactKind.SPEC),
        validate_file(paths.test, ArtifactKind.TEST, required),
    ])
    if not report.valid:
        logger.warning("Validation found %d errors", len(report.errors))
    return report

"""nalagen — NALA Playwright test generator with run-and-fix.

Usage:
    from nalagen import ComponentConfig, SuiteBuilder, VariantRegistry, load_project_settings

    settings = load_project_settings()
    registry = VariantRegistry(settings)
    registry.initialize()
    SuiteBuilder(settings, registry).generate(ComponentConfig.model_validate(data), TestType.CSS)
"""

from nalagen.types import (
    AutoFixResult, ClassifiedError, ComponentConfig, ComponentMetadata, ElementConfig,
    ErrorKind, ExtractedElement, GeneratedArtifact, InteractionConfig, RunAttempt,
    SurfaceRules, TestType, ValidationReport, VariantDescriptor, VariantOrigin, WriteResult,
)
from nalagen.exceptions import (
    NalagenError, InvalidInputError, ConfigError, ProjectNotFoundError,
    GenerationError, ExtractionError, TestCommandError,
)
from nalagen.config import load_project_settings
from nalagen.pipeline import SuiteBuilder
from nalagen.variants import VariantRegistry
from nalagen.version import __version__

__all__ = [
    "AutoFixResult", "ClassifiedError", "ComponentConfig", "ComponentMetadata", "ElementConfig",
    "ErrorKind", "ExtractedElement", "GeneratedArtifact", "InteractionConfig", "RunAttempt",
    "SurfaceRules", "TestType", "ValidationReport", "VariantDescriptor", "VariantOrigin", "WriteResult",
    "NalagenError", "InvalidInputError", "ConfigError", "ProjectNotFoundError",
    "GenerationError", "ExtractionError", "TestCommandError",
    "load_project_settings",
    "SuiteBuilder",
    "VariantRegistry",
    "__version__",
]

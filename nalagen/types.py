"""All shared types, enums, and type aliases. Everything imports from here."""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ── Enums ──────────────────────────────────────────────────────────────

class VariantOrigin(str, Enum):
    BUILTIN = "builtin"         # shipped catalog
    CUSTOM = "custom"           # registered by the user, persisted to config
    DISCOVERED = "discovered"   # found as a source file in the target project
    DYNAMIC = "dynamic"         # unknown name accepted on the fly

class TestType(str, Enum):
    __test__ = False

    CSS = "css"
    FUNCTIONAL = "functional"
    EDIT = "edit"
    SAVE = "save"
    DISCARD = "discard"
    INTERACTION = "interaction"

class ArtifactKind(str, Enum):
    PAGE_OBJECT = "page_object"
    SPEC = "spec"
    TEST = "test"

class ProjectType(str, Enum):
    MAS = "mas"
    MILO = "milo"

class MiloCategory(str, Enum):
    BLOCK = "block"
    FEATURE = "feature"

class ErrorKind(str, Enum):
    MISSING_CSS_PROPERTIES = "missing-css-properties"
    INVALID_SELECTOR = "invalid-selector"
    TIMEOUT = "timeout"
    AUTHENTICATION = "authentication"
    CLEANUP = "cleanup"
    CSS_MISMATCH = "css-mismatch"
    UNKNOWN = "unknown"


DEFAULT_TEST_TYPES = [
    TestType.CSS, TestType.FUNCTIONAL, TestType.EDIT, TestType.SAVE, TestType.DISCARD,
]


class _CamelModel(BaseModel):
    """Accepts both snake_case and the camelCase keys used in project JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Variants ───────────────────────────────────────────────────────────

class VariantDescriptor(_CamelModel):
    name: str
    label: str
    surface: str
    test_types: list[TestType] = Field(default_factory=lambda: list(DEFAULT_TEST_TYPES))
    selectors: dict[str, str] = Field(default_factory=dict)
    origin: VariantOrigin = VariantOrigin.CUSTOM
    source_path: Optional[str] = None


class SurfaceRules(_CamelModel):
    """Ordered glob → surface mapping. First matching pattern wins."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    patterns: dict[str, str] = Field(default_factory=dict)
    default: str = "acom"

    def merged_with(self, base: "SurfaceRules") -> "SurfaceRules":
        """Return rules trying these patterns first, then ``base``'s."""
        patterns = dict(self.patterns)
        for pattern, surface in base.patterns.items():
            patterns.setdefault(pattern, surface)
        return SurfaceRules(patterns=patterns, default=self.default)


class DiscoveryResult(BaseModel):
    discovered: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    cached: bool = False
    error: Optional[str] = None


# ── Component configuration ────────────────────────────────────────────

class InteractionConfig(_CamelModel):
    type: str = "click"         # click | hover | type | select | edit
    value: Optional[str] = None
    wait_for: Optional[str] = None
    expected_result: Optional[str] = None


class ElementConfig(_CamelModel):
    selector: str = Field(min_length=1)
    expected_text: Optional[str] = None
    expected_value: Optional[str] = None
    expected_attribute: Optional[dict[str, str]] = None
    css_properties: dict[str, str] = Field(default_factory=dict)
    interactions: list[InteractionConfig] = Field(default_factory=list)


class ComponentMetadata(_CamelModel):
    path: Optional[str] = None
    browser_params: Optional[str] = None
    milolibs: Optional[str] = None
    variant: Optional[str] = None       # merch-card "variant" attribute; defaults to ccd-<type>
    tags: list[str] = Field(default_factory=list)


class ComponentConfig(_CamelModel):
    """Description of one card/block to generate tests for.

    ``elements`` keeps insertion order; generated output follows it.
    A ``None`` element is declared but not populated and is skipped.
    """

    component_type: str = Field(
        validation_alias=AliasChoices("component_type", "componentType", "cardType", "card_type"),
    )
    component_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("component_id", "componentId", "cardId", "card_id"),
    )
    elements: dict[str, Optional[ElementConfig]] = Field(default_factory=dict)
    css_properties: dict[str, dict[str, str]] = Field(default_factory=dict)
    test_types: list[TestType] = Field(default_factory=lambda: [TestType.CSS])
    metadata: ComponentMetadata = Field(default_factory=ComponentMetadata)
    test_suite: Optional[str] = None

    def populated(self) -> list[tuple[str, ElementConfig]]:
        """(name, config) for every populated element, in mapping order."""
        return [(name, el) for name, el in self.elements.items() if el is not None]


# ── Generation / output ────────────────────────────────────────────────

class GeneratedArtifact(BaseModel):
    kind: ArtifactKind
    path: str
    content: str


class WriteResult(BaseModel):
    path: str
    success: bool
    message: str = ""
    error: Optional[str] = None


# ── Test execution ─────────────────────────────────────────────────────

class CommandOutput(BaseModel):
    """Captured result of one external test-command invocation."""
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    duration_ms: int = 0

    @property
    def text(self) -> str:
        return f"{self.stdout}\n{self.stderr}" if self.stderr else self.stdout


class ClassifiedError(BaseModel):
    kind: ErrorKind
    message: str
    detail: Optional[str] = None   # file or selector pulled out of the output
    remediable: bool = False


class RunAttempt(BaseModel):
    attempt_number: int
    test_output: str = ""
    classified_errors: list[ClassifiedError] = Field(default_factory=list)
    patches_applied: list[str] = Field(default_factory=list)


class AutoFixResult(BaseModel):
    success: bool
    attempts: int
    last_errors: list[ClassifiedError] = Field(default_factory=list)
    history: list[RunAttempt] = Field(default_factory=list)


class TestRunSummary(BaseModel):
    """Counts parsed from one test-runner invocation."""
    __test__ = False

    success: bool
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    exit_code: Optional[int] = None
    errors: list[ClassifiedError] = Field(default_factory=list)
    output: str = ""


class ExtractedElement(_CamelModel):
    selector: str
    slot: Optional[str] = None
    text: Optional[str] = None
    css_properties: dict[str, str] = Field(default_factory=dict)


class FileCheck(BaseModel):
    path: str
    kind: ArtifactKind
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


class ValidationReport(BaseModel):
    files: list[FileCheck] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return all(f.valid for f in self.files)

    @property
    def errors(self) -> list[str]:
        return [f"{f.path}: {e}" for f in self.files for e in f.errors]

    @property
    def warnings(self) -> list[str]:
        return [f"{f.path}: {w}" for f in self.files for w in f.warnings]


class WorkflowResult(BaseModel):
    """Outcome of generate → validate → run for one variant."""
    success: bool
    phase: str
    duration_ms: int = 0
    written: list[WriteResult] = Field(default_factory=list)
    validation: Optional[ValidationReport] = None
    execution: Optional[TestRunSummary] = None
    autofix: Optional[AutoFixResult] = None
    summary: str = ""

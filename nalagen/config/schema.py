"""Pydantic models for the project JSON config and the bundled YAML defaults.

The JSON file (``.nala-mcp.json``) uses camelCase keys; the models accept
either spelling and write camelCase back out.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from nalagen.types import DEFAULT_TEST_TYPES, ProjectType, SurfaceRules, TestType

DEFAULT_OUTPUT_PATH = "nala"
VARIANTS_SUBDIR = Path("web-components") / "src" / "variants"

DEFAULT_IMPORT_PATHS = {
    "studioPage": "../../../studio.page.js",
    "webUtil": "../../../../libs/webutil.js",
    "editorPage": "../../../editor.page.js",
    "ostPage": "../../../ost.page.js",
}


class _FileModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class VariantEntry(_FileModel):
    """A custom variant as persisted under ``variants`` in the project file."""

    label: Optional[str] = None
    surface: Optional[str] = None
    test_types: list[TestType] = Field(default_factory=lambda: list(DEFAULT_TEST_TYPES))
    selectors: dict[str, str] = Field(default_factory=dict)


class ProjectEntry(_FileModel):
    """One block of the ``projects`` map."""

    path: str
    type: ProjectType = ProjectType.MAS
    test_output_path: Optional[str] = None
    import_paths: Optional[dict[str, str]] = None
    variants: dict[str, VariantEntry] = Field(default_factory=dict)
    surface_rules: Optional[SurfaceRules] = None

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v):
        if isinstance(v, str):
            return ProjectType(v.lower())
        return v


class ProjectConfigFile(_FileModel):
    """Root schema for ``.nala-mcp.json``."""

    target_project_path: Optional[str] = None
    test_output_path: str = DEFAULT_OUTPUT_PATH
    import_paths: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_IMPORT_PATHS))
    variants: dict[str, VariantEntry] = Field(default_factory=dict)
    surface_rules: Optional[SurfaceRules] = None
    projects: dict[str, ProjectEntry] = Field(default_factory=dict)
    default_project: Optional[str] = None


class ProjectSettings(BaseModel):
    """Settings for the one project a command operates on, fully resolved."""

    name: Optional[str] = None
    root: Path
    type: ProjectType = ProjectType.MAS
    test_output_path: str = DEFAULT_OUTPUT_PATH
    import_paths: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_IMPORT_PATHS))
    variants: dict[str, VariantEntry] = Field(default_factory=dict)
    surface_rules: Optional[SurfaceRules] = None
    config_path: Optional[Path] = None

    @property
    def output_root(self) -> Path:
        return self.root / self.test_output_path

    @property
    def variants_dir(self) -> Path:
        return self.root / VARIANTS_SUBDIR


# ── Bundled YAML defaults ──────────────────────────────────────────────

class CatalogEntryYAML(BaseModel):
    value: str
    label: str
    surface: str


class VariantCatalogYAML(BaseModel):
    """Root schema for defaults/variants.yaml."""
    variants: list[CatalogEntryYAML] = Field(default_factory=list)


class MiloTypeYAML(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    display_name: str


class MiloTypesYAML(BaseModel):
    """Root schema for defaults/milo_types.yaml."""
    blocks: dict[str, MiloTypeYAML] = Field(default_factory=dict)
    features: dict[str, MiloTypeYAML] = Field(default_factory=dict)

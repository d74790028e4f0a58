"""Application settings + project config loader for nalagen.

All env vars defined here with NALAGEN_ prefix, except the two live-run
credentials which keep their conventional names (IMS_EMAIL, IMS_PASS).
Project file loaders: load_project_settings(), load_project_file()
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from nalagen.config.loader import (
    CONFIG_FILENAME,
    add_project,
    find_project_file,
    init_project_file,
    load_milo_types,
    load_project_file,
    load_project_settings,
    load_project_settings_or_default,
    load_variant_catalog,
    read_json,
    resolve_project,
    write_json,
)
from nalagen.config.schema import (
    DEFAULT_IMPORT_PATHS,
    ProjectConfigFile,
    ProjectEntry,
    ProjectSettings,
    VariantEntry,
)


class NalagenConfig(BaseSettings):
    # ── App ──
    log_level: str = "WARNING"
    config_filename: str = CONFIG_FILENAME

    # ── Variant discovery ──
    discovery_ttl_seconds: float = 60.0

    # ── Test execution ──
    test_command: str = "npm run nala"
    test_timeout_seconds: int = 300
    max_fix_attempts: int = 3
    default_branch: str = "local"
    default_mode: str = "headless"
    default_milolibs: str = "local"

    # ── Live extraction ──
    studio_local_url: str = "http://localhost:3000"
    studio_branch_url: str = "https://{branch}--mas--adobecom.aem.page"
    browser_headless: bool = True
    extraction_timeout_ms: int = 30000

    # ── Credentials (live runs only) ──
    ims_email: Optional[str] = Field(default=None, validation_alias="IMS_EMAIL")
    ims_pass: Optional[str] = Field(default=None, validation_alias="IMS_PASS")

    model_config = {
        "env_prefix": "NALAGEN_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def missing_credentials(self) -> list[str]:
        """Names of the live-run credential variables that are unset."""
        missing = []
        if not self.ims_email:
            missing.append("IMS_EMAIL")
        if not self.ims_pass:
            missing.append("IMS_PASS")
        return missing


config = NalagenConfig()


__all__ = [
    "NalagenConfig",
    "config",
    "CONFIG_FILENAME",
    "DEFAULT_IMPORT_PATHS",
    "ProjectConfigFile",
    "ProjectEntry",
    "ProjectSettings",
    "VariantEntry",
    "add_project",
    "find_project_file",
    "init_project_file",
    "load_milo_types",
    "load_project_file",
    "load_project_settings",
    "load_project_settings_or_default",
    "load_variant_catalog",
    "read_json",
    "resolve_project",
    "write_json",
]

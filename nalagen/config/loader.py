"""Load and save the project JSON config; load bundled YAML defaults.

Resolution order for the project file (``.nala-mcp.json``):
  1. Path passed explicitly by caller
  2. ./.nala-mcp.json in current working directory
  3. ~/.nala-mcp.json in the user's home directory

With no file at all, a command runs against the current directory with
default settings. Bundled defaults (variants.yaml, milo_types.yaml) are read
from nalagen/config/defaults unless a path is given.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from nalagen.config.schema import (
    DEFAULT_IMPORT_PATHS,
    MiloTypesYAML,
    ProjectConfigFile,
    ProjectEntry,
    ProjectSettings,
    VariantCatalogYAML,
)
from nalagen.exceptions import ConfigError, ProjectNotFoundError
from nalagen.types import ProjectType

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".nala-mcp.json"

# Paths to bundled defaults
_DEFAULTS_DIR = Path(__file__).parent / "defaults"
_DEFAULT_VARIANTS = _DEFAULTS_DIR / "variants.yaml"
_DEFAULT_MILO_TYPES = _DEFAULTS_DIR / "milo_types.yaml"


def find_project_file(explicit: Optional[Path] = None, name: str = CONFIG_FILENAME) -> Optional[Path]:
    """Locate the project file: explicit > cwd > home. None if absent."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(f"Config file not found: {p}", path=str(p))
        return p

    cwd_path = Path.cwd() / name
    if cwd_path.exists():
        return cwd_path

    home_path = Path.home() / name
    if home_path.exists():
        return home_path

    return None


def read_json(path: Path) -> dict:
    """Read a JSON object from ``path``. Missing file reads as ``{}``."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8") or "{}")
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Malformed JSON in {path}: {exc}", path=str(path)) from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a JSON object in {path}", path=str(path))
    return raw


def write_json(path: Path, data: dict) -> None:
    """Write ``data`` as indented JSON via a temp file + rename.

    Readers never see a half-written file. Concurrent writers are
    last-writer-wins.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2) + "\n")
        os.replace(tmp, path)
    except OSError:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def load_project_file(path: Path) -> ProjectConfigFile:
    """Parse ``path`` into a ProjectConfigFile.

    Raises:
        ConfigError: unreadable file, malformed JSON, or schema mismatch
    """
    try:
        raw = read_json(path)
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}", path=str(path)) from exc
    try:
        return ProjectConfigFile.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid project config {path}: {exc}", path=str(path)) from exc


def resolve_project(
    file_cfg: ProjectConfigFile,
    config_path: Optional[Path] = None,
    project: Optional[str] = None,
) -> ProjectSettings:
    """Pick one project out of ``file_cfg`` and resolve its settings.

    An explicit ``project`` wins, then ``defaultProject``, then the
    top-level (single-project) keys.

    Raises:
        ProjectNotFoundError: ``project`` names a project the file lacks
    """
    name = project or file_cfg.default_project
    if name is not None:
        entry = file_cfg.projects.get(name)
        if entry is None:
            if project is not None:
                raise ProjectNotFoundError(
                    f"Project '{name}' not found in configuration", project=name,
                )
            logger.warning("defaultProject '%s' is not defined, using top-level settings", name)
        else:
            return _settings_for_entry(name, entry, file_cfg, config_path)

    root = _resolve_root(file_cfg.target_project_path, config_path)
    return ProjectSettings(
        root=root,
        test_output_path=file_cfg.test_output_path,
        import_paths=file_cfg.import_paths,
        variants=file_cfg.variants,
        surface_rules=file_cfg.surface_rules,
        config_path=config_path,
    )


def load_project_settings(
    path: Optional[Path] = None,
    project: Optional[str] = None,
) -> ProjectSettings:
    """find_project_file + load_project_file + resolve_project in one call."""
    config_path = find_project_file(path)
    if config_path is None:
        if project is not None:
            raise ProjectNotFoundError(
                f"Project '{project}' requested but no {CONFIG_FILENAME} was found",
                project=project,
            )
        logger.debug("No %s found, using defaults rooted at %s", CONFIG_FILENAME, Path.cwd())
        return ProjectSettings(root=Path.cwd(), config_path=Path.cwd() / CONFIG_FILENAME)
    return resolve_project(load_project_file(config_path), config_path, project)


def load_project_settings_or_default(
    path: Optional[Path] = None,
    project: Optional[str] = None,
) -> ProjectSettings:
    """Like load_project_settings, but a broken project file only warns.

    A missing named project is still an error: the caller asked for it.
    """
    try:
        return load_project_settings(path, project)
    except ProjectNotFoundError:
        raise
    except ConfigError as exc:
        logger.warning("%s; continuing with default settings", exc)
        return ProjectSettings(root=Path.cwd(), config_path=Path(exc.path) if exc.path else None)


def init_project_file(target: Path, path: Optional[Path] = None, output_path: str = "nala") -> Path:
    """Write a starter project file pointing at ``target``. Returns its path."""
    path = Path(path) if path is not None else Path.cwd() / CONFIG_FILENAME
    data = read_json(path)
    data.update({
        "targetProjectPath": str(Path(target).resolve()),
        "testOutputPath": output_path,
        "importPaths": data.get("importPaths", dict(DEFAULT_IMPORT_PATHS)),
    })
    write_json(path, data)
    logger.info("Wrote project config %s", path)
    return path


def add_project(
    name: str,
    project_path: Path,
    project_type: ProjectType,
    config_path: Optional[Path] = None,
    make_default: bool = False,
) -> Path:
    """Add or replace a ``projects`` entry, keeping every other key."""
    config_path = Path(config_path) if config_path is not None else (
        find_project_file() or Path.cwd() / CONFIG_FILENAME
    )
    data = read_json(config_path)
    projects = data.setdefault("projects", {})
    entry = projects.get(name, {})
    entry.update({"path": str(Path(project_path).resolve()), "type": ProjectType(project_type).value})
    projects[name] = entry
    if make_default or not data.get("defaultProject"):
        data["defaultProject"] = name
    write_json(config_path, data)
    logger.info("Registered project '%s' (%s) in %s", name, entry["type"], config_path)
    return config_path


def load_variant_catalog(path: Optional[Path] = None) -> VariantCatalogYAML:
    """Load variants.yaml → VariantCatalogYAML."""
    resolved = Path(path) if path is not None else _DEFAULT_VARIANTS
    raw = yaml.safe_load(resolved.read_text())
    return VariantCatalogYAML.model_validate(raw or {"variants": []})


def load_milo_types(path: Optional[Path] = None) -> MiloTypesYAML:
    """Load milo_types.yaml → MiloTypesYAML."""
    resolved = Path(path) if path is not None else _DEFAULT_MILO_TYPES
    raw = yaml.safe_load(resolved.read_text())
    return MiloTypesYAML.model_validate(raw or {})


# ─── Internal ───────────────────────────────────────────────────────────

def _resolve_root(target: Optional[str], config_path: Optional[Path]) -> Path:
    if not target:
        return Path.cwd()
    root = Path(target).expanduser()
    if not root.is_absolute() and config_path is not None:
        root = Path(config_path).parent / root
    return root


def _settings_for_entry(
    name: str,
    entry: ProjectEntry,
    file_cfg: ProjectConfigFile,
    config_path: Optional[Path],
) -> ProjectSettings:
    return ProjectSettings(
        name=name,
        root=_resolve_root(entry.path, config_path),
        type=entry.type,
        test_output_path=entry.test_output_path or file_cfg.test_output_path,
        import_paths=entry.import_paths or file_cfg.import_paths,
        variants=entry.variants or file_cfg.variants,
        surface_rules=entry.surface_rules or file_cfg.surface_rules,
        config_path=config_path,
    )

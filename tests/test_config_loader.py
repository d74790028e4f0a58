"""Tests for nalagen/config — project file loading, saving, and env settings."""

import json

import pytest

from nalagen.config import (
    DEFAULT_IMPORT_PATHS,
    NalagenConfig,
    add_project,
    find_project_file,
    init_project_file,
    load_milo_types,
    load_project_file,
    load_project_settings,
    load_project_settings_or_default,
    load_variant_catalog,
    read_json,
    write_json,
)
from nalagen.exceptions import ConfigError, ProjectNotFoundError
from nalagen.types import ProjectType


# ── Helpers ───────────────────────────────────────────────────────────────────

def _write_config(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """cwd and home both point at empty temp dirs."""
    cwd = tmp_path / "cwd"
    home = tmp_path / "home"
    cwd.mkdir()
    home.mkdir()
    monkeypatch.chdir(cwd)
    monkeypatch.setenv("HOME", str(home))
    return cwd, home


# ── JSON I/O ──────────────────────────────────────────────────────────────────

class TestJsonIO:

    def test_missing_file_reads_empty(self, tmp_path):
        assert read_json(tmp_path / "absent.json") == {}

    def test_empty_file_reads_empty(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("", encoding="utf-8")
        assert read_json(path) == {}

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="Malformed JSON") as exc_info:
            read_json(path)
        assert exc_info.value.path == str(path)

    def test_non_object_rejected(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError, match="Expected a JSON object"):
            read_json(path)

    def test_write_creates_parents_and_leaves_no_temp(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "cfg.json"
        write_json(path, {"a": 1})
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1}
        assert [p.name for p in path.parent.iterdir()] == ["cfg.json"]


# ── Finding the file ──────────────────────────────────────────────────────────

class TestFindProjectFile:

    def test_explicit_missing_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            find_project_file(tmp_path / "nope.json")

    def test_cwd_before_home(self, isolated):
        cwd, home = isolated
        _write_config(home / ".nala-mcp.json", {})
        assert find_project_file() == home / ".nala-mcp.json"
        _write_config(cwd / ".nala-mcp.json", {})
        assert find_project_file() == cwd / ".nala-mcp.json"

    def test_none_when_absent(self, isolated):
        assert find_project_file() is None


# ── Resolving settings ────────────────────────────────────────────────────────

class TestLoadProjectSettings:

    def test_top_level_keys(self, tmp_path, project_root):
        path = _write_config(tmp_path / "cfg.json", {
            "targetProjectPath": str(project_root),
            "testOutputPath": "e2e",
            "variants": {"ccd-promo": {"surface": "ccd"}},
        })
        settings = load_project_settings(path)
        assert settings.root == project_root
        assert settings.output_root == project_root / "e2e"
        assert settings.variants["ccd-promo"].surface == "ccd"
        assert settings.import_paths == DEFAULT_IMPORT_PATHS
        assert settings.config_path == path
        assert settings.name is None

    def test_relative_root_resolves_against_config_dir(self, tmp_path):
        path = _write_config(tmp_path / "cfg.json", {"targetProjectPath": "../mas"})
        assert load_project_settings(path).root == tmp_path / ".." / "mas"

    def test_default_project(self, tmp_path, project_root):
        path = _write_config(tmp_path / "cfg.json", {
            "testOutputPath": "shared",
            "projects": {
                "milo": {"path": str(project_root), "type": "MILO"},
                "mas": {"path": "/elsewhere", "testOutputPath": "nala"},
            },
            "defaultProject": "milo",
        })
        settings = load_project_settings(path)
        assert settings.name == "milo"
        assert settings.type == ProjectType.MILO
        assert settings.test_output_path == "shared"

    def test_explicit_project_wins(self, tmp_path, project_root):
        path = _write_config(tmp_path / "cfg.json", {
            "projects": {
                "milo": {"path": "/milo", "type": "milo"},
                "mas": {"path": str(project_root), "testOutputPath": "nala"},
            },
            "defaultProject": "milo",
        })
        settings = load_project_settings(path, "mas")
        assert settings.name == "mas"
        assert settings.type == ProjectType.MAS
        assert settings.root == project_root

    def test_unknown_explicit_project(self, tmp_path):
        path = _write_config(tmp_path / "cfg.json", {"projects": {}})
        with pytest.raises(ProjectNotFoundError) as exc_info:
            load_project_settings(path, "ghost")
        assert exc_info.value.project == "ghost"

    def test_unknown_default_project_falls_back(self, tmp_path, project_root, caplog):
        path = _write_config(tmp_path / "cfg.json", {
            "targetProjectPath": str(project_root),
            "defaultProject": "ghost",
        })
        settings = load_project_settings(path)
        assert settings.root == project_root
        assert settings.name is None
        assert "defaultProject 'ghost' is not defined" in caplog.text

    def test_no_file_uses_cwd(self, isolated):
        cwd, _ = isolated
        settings = load_project_settings()
        assert settings.root == cwd
        assert settings.config_path == cwd / ".nala-mcp.json"

    def test_no_file_with_named_project(self, isolated):
        with pytest.raises(ProjectNotFoundError, match="no .nala-mcp.json was found"):
            load_project_settings(project="mas")

    def test_schema_mismatch(self, tmp_path):
        path = _write_config(tmp_path / "cfg.json", {"projects": {"x": {"type": "mas"}}})
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_file(path)

    def test_unknown_project_type(self, tmp_path):
        path = _write_config(tmp_path / "cfg.json", {"projects": {"x": {"path": "/x", "type": "react"}}})
        with pytest.raises(ConfigError):
            load_project_file(path)


class TestLoadOrDefault:

    def test_broken_file_warns_and_defaults(self, isolated, tmp_path, caplog):
        cwd, _ = isolated
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        settings = load_project_settings_or_default(path)
        assert settings.root == cwd
        assert settings.config_path == path
        assert "continuing with default settings" in caplog.text

    def test_missing_project_still_raises(self, tmp_path):
        path = _write_config(tmp_path / "cfg.json", {})
        with pytest.raises(ProjectNotFoundError):
            load_project_settings_or_default(path, "ghost")


# ── Writing the file ──────────────────────────────────────────────────────────

class TestInitAndAddProject:

    def test_init_keeps_existing_keys(self, tmp_path, project_root):
        path = _write_config(tmp_path / "cfg.json", {
            "variants": {"ccd-promo": {"surface": "ccd"}},
            "importPaths": {"studioPage": "x.js"},
        })
        assert init_project_file(project_root, path, output_path="e2e") == path
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["targetProjectPath"] == str(project_root.resolve())
        assert data["testOutputPath"] == "e2e"
        assert data["importPaths"] == {"studioPage": "x.js"}
        assert data["variants"] == {"ccd-promo": {"surface": "ccd"}}

    def test_init_default_location(self, isolated, project_root):
        cwd, _ = isolated
        path = init_project_file(project_root)
        assert path == cwd / ".nala-mcp.json"
        assert json.loads(path.read_text(encoding="utf-8"))["importPaths"] == DEFAULT_IMPORT_PATHS

    def test_first_project_becomes_default(self, tmp_path, project_root):
        path = tmp_path / "cfg.json"
        add_project("mas", project_root, ProjectType.MAS, config_path=path)
        add_project("milo", project_root, ProjectType.MILO, config_path=path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["defaultProject"] == "mas"
        assert data["projects"]["milo"] == {"path": str(project_root.resolve()), "type": "milo"}

    def test_make_default_and_update_keeps_extra_keys(self, tmp_path, project_root):
        path = _write_config(tmp_path / "cfg.json", {
            "projects": {"milo": {"path": "/old", "type": "milo", "testOutputPath": "e2e"}},
            "defaultProject": "mas",
        })
        add_project("milo", project_root, ProjectType.MILO, config_path=path, make_default=True)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["defaultProject"] == "milo"
        assert data["projects"]["milo"]["testOutputPath"] == "e2e"
        assert data["projects"]["milo"]["path"] == str(project_root.resolve())

    def test_added_project_loads(self, tmp_path, project_root):
        path = tmp_path / "cfg.json"
        add_project("milo", project_root, ProjectType.MILO, config_path=path)
        settings = load_project_settings(path)
        assert settings.name == "milo"
        assert settings.root == project_root.resolve()


# ── Bundled defaults ──────────────────────────────────────────────────────────

class TestBundledDefaults:

    def test_variant_catalog(self):
        catalog = load_variant_catalog()
        by_value = {entry.value: entry for entry in catalog.variants}
        assert by_value["fries"].surface == "commerce"
        assert "all" in by_value

    def test_variant_catalog_empty_file(self, tmp_path):
        path = tmp_path / "variants.yaml"
        path.write_text("", encoding="utf-8")
        assert load_variant_catalog(path).variants == []

    def test_milo_types(self):
        types = load_milo_types()
        assert types.blocks
        assert all(entry.display_name for entry in types.blocks.values())


# ── Environment settings ──────────────────────────────────────────────────────

class TestNalagenConfig:

    def test_defaults(self, monkeypatch):
        for name in ("NALAGEN_TEST_COMMAND", "NALAGEN_MAX_FIX_ATTEMPTS"):
            monkeypatch.delenv(name, raising=False)
        cfg = NalagenConfig(_env_file=None)
        assert cfg.test_command == "npm run nala"
        assert cfg.max_fix_attempts == 3
        assert cfg.default_mode == "headless"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("NALAGEN_MAX_FIX_ATTEMPTS", "5")
        monkeypatch.setenv("NALAGEN_DEFAULT_BRANCH", "main")
        cfg = NalagenConfig(_env_file=None)
        assert cfg.max_fix_attempts == 5
        assert cfg.default_branch == "main"

    def test_credentials_use_plain_names(self, monkeypatch):
        monkeypatch.setenv("IMS_EMAIL", "qa@example.com")
        monkeypatch.delenv("IMS_PASS", raising=False)
        cfg = NalagenConfig(_env_file=None)
        assert cfg.ims_email == "qa@example.com"
        assert cfg.missing_credentials() == ["IMS_PASS"]

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NALAGEN_TEST_TIMEOUT_SECONDS", raising=False)
        env = tmp_path / ".env"
        env.write_text("NALAGEN_TEST_TIMEOUT_SECONDS=60\n", encoding="utf-8")
        assert NalagenConfig(_env_file=env).test_timeout_seconds == 60

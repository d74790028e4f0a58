"""Test fixtures: frozen clock, temp project, fake lister, scripted runner/extractor.

All tests should use these fixtures for consistency.
"""

from datetime import date
from pathlib import Path

import pytest

from nalagen.config.schema import ProjectSettings
from nalagen.types import CommandOutput, ComponentConfig, ExtractedElement
from nalagen.variants.registry import VariantRegistry

FROZEN_DAY = date(2025, 1, 15)
CARD_ID = "26f091c2-995d-4a96-a193-d62f6c73af2f"


class FakeLister:
    """In-memory DirectoryLister: {directory: [file names]}."""

    def __init__(self, files: dict = None, broken: bool = False):
        self.files = {Path(k): list(v) for k, v in (files or {}).items()}
        self.broken = broken
        self.list_calls = 0

    def list_files(self, directory):
        self.list_calls += 1
        if self.broken or Path(directory) not in self.files:
            raise FileNotFoundError(str(directory))
        return list(self.files[Path(directory)])

    def exists(self, path):
        path = Path(path)
        return path.name in self.files.get(path.parent, [])


class ScriptedRunner:
    """TestRunner returning queued outputs in order; the last one repeats."""

    def __init__(self, *outputs):
        self.outputs = list(outputs)
        self.calls = []

    async def run(self, tag, branch, mode, milolibs):
        self.calls.append((tag, branch, mode, milolibs))
        output = self.outputs[min(len(self.calls), len(self.outputs)) - 1]
        if isinstance(output, Exception):
            raise output
        if isinstance(output, CommandOutput):
            return output
        exit_code = 0 if "passed" in output and "failed" not in output else 1
        return CommandOutput(exit_code=exit_code, stdout=output)


class StubExtractor:
    """PropertyExtractor returning a fixed extraction (or raising)."""

    def __init__(self, extracted: dict = None, error: Exception = None):
        self.extracted = extracted if extracted is not None else sample_extraction()
        self.error = error
        self.calls = []

    async def extract(self, component_id, branch, milolibs):
        self.calls.append((component_id, branch, milolibs))
        if self.error is not None:
            raise self.error
        return self.extracted


def sample_extraction() -> dict:
    return {
        "card": ExtractedElement(
            selector="merch-card.fries",
            css_properties={"background-color": "rgb(255, 255, 255)", "border-color": "none", "width": "378px"},
        ),
        "title": ExtractedElement(
            selector="h3",
            slot="heading-xxs",
            text="Photoshop",
            css_properties={"color": "rgb(44, 44, 44)", "font-size": "20px", "line-height": ""},
        ),
        "description": ExtractedElement(
            selector="div.body",
            slot="body-s",
            css_properties={"color": "rgb(34, 34, 34)"},
        ),
    }


@pytest.fixture
def fixed_clock():
    return lambda: FROZEN_DAY


@pytest.fixture
def sample_config():
    """Fries card: four populated elements, one declared-only, CSS, interactions."""
    return ComponentConfig.model_validate({
        "cardType": "fries",
        "cardId": CARD_ID,
        "elements": {
            "title": {
                "selector": "h3[slot=\"heading-xxs\"]",
                "cssProperties": {"color": "rgb(44, 44, 44)", "font-size": "20px"},
                "interactions": [{"type": "click"}],
            },
            "description": {"selector": "div[slot=\"body-s\"]", "cssProperties": {"color": "rgb(34, 34, 34)"}},
            "price": {"selector": "span[is=\"inline-price\"]"},
            "cta": {
                "selector": "div[slot=\"footer\"] > a",
                "interactions": [{"type": "hover"}, {"type": "type", "value": "it's here"}],
            },
            "badge": None,
        },
        "cssProperties": {"card": {"background-color": "rgb(255, 255, 255)", "width": "378px"}},
        "testTypes": ["css", "edit"],
    })


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / "mas"
    root.mkdir()
    return root


@pytest.fixture
def settings(project_root):
    return ProjectSettings(root=project_root, config_path=project_root / ".nala-mcp.json")


@pytest.fixture
def lister(settings):
    return FakeLister({settings.variants_dir: ["fries.js", "fries.test.js", "ccd-promo.js", "README.md"]})


@pytest.fixture
def registry(settings, lister):
    reg = VariantRegistry(settings, lister=lister)
    reg.initialize()
    return reg


@pytest.fixture
def card_id():
    return CARD_ID


@pytest.fixture
def extraction():
    return sample_extraction()


@pytest.fixture
def make_runner():
    return ScriptedRunner


@pytest.fixture
def make_extractor():
    return StubExtractor


@pytest.fixture
def make_lister():
    return FakeLister

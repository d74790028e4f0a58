from nalagen.runner.autofix import AutoFixRunner
from nalagen.runner.command import TestCommand, TestRunner
from nalagen.runner.extractor import PlaywrightExtractor, PropertyExtractor, studio_url, to_component_config
from nalagen.runner.patcher import patch_page_object
from nalagen.runner.report import generate_test_report
from nalagen.runner.signatures import SIGNATURES, classify, summarize_run
from nalagen.runner.validator import validate_file, validate_generated_files, validate_test_file

__all__ = [
    "AutoFixRunner",
    "TestCommand",
    "TestRunner",
    "PlaywrightExtractor",
    "PropertyExtractor",
    "studio_url",
    "to_component_config",
    "patch_page_object",
    "generate_test_report",
    "SIGNATURES",
    "classify",
    "summarize_run",
    "validate_file",
    "validate_generated_files",
    "validate_test_file",
]

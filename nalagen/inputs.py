"""Argument validation for anything that reaches a path, URL, or subprocess.

Every check raises InvalidInputError (a usage error) and otherwise returns
the normalised value.
"""

import re
import uuid

from nalagen.exceptions import InvalidInputError
from nalagen.types import TestType

_RUN_ARGUMENT = re.compile(r"^[a-zA-Z0-9_/-]+$")
_COMPONENT_TYPE = re.compile(r"^[a-z0-9-]+$")

MAX_ARGUMENT_LENGTH = 100
MAX_COMPONENT_TYPE_LENGTH = 50
MIN_TIMEOUT_MS = 1000
MAX_TIMEOUT_MS = 300000

MODES = ("headed", "headless")


def validate_run_argument(value: str, field: str = "argument") -> str:
    """Branch names, tags, and milolibs values passed to the test command."""
    if not value:
        raise InvalidInputError(f"{field} is required", field=field, value=value or "")
    if len(value) > MAX_ARGUMENT_LENGTH:
        raise InvalidInputError(
            f"{field} is too long (max {MAX_ARGUMENT_LENGTH} characters)", field=field, value=value,
        )
    if not _RUN_ARGUMENT.match(value):
        raise InvalidInputError(
            f"{field} may only contain letters, digits, '_', '-' and '/': {value!r}", field=field, value=value,
        )
    return value


def validate_branch(branch: str) -> str:
    return validate_run_argument(branch, field="branch")


def validate_tag(tag: str) -> str:
    """Test tags may carry one leading '@' (@studio-fries-css)."""
    validate_run_argument(tag[1:] if tag.startswith("@") else tag, field="tag")
    return tag


def validate_component_id(component_id: str) -> str:
    try:
        return str(uuid.UUID(component_id))
    except (ValueError, AttributeError, TypeError):
        raise InvalidInputError(
            f"Card id must be a UUID: {component_id!r}", field="component_id", value=str(component_id),
        ) from None


def validate_component_type(component_type: str) -> str:
    if not component_type:
        raise InvalidInputError("Card type is required", field="component_type", value="")
    if ".." in component_type or "/" in component_type:
        raise InvalidInputError(
            f"Card type must not contain path separators: {component_type!r}",
            field="component_type", value=component_type,
        )
    if len(component_type) > MAX_COMPONENT_TYPE_LENGTH:
        raise InvalidInputError(
            f"Card type is too long (max {MAX_COMPONENT_TYPE_LENGTH} characters)",
            field="component_type", value=component_type,
        )
    if not _COMPONENT_TYPE.match(component_type):
        raise InvalidInputError(
            f"Card type may only contain lowercase letters, digits and '-': {component_type!r}",
            field="component_type", value=component_type,
        )
    return component_type


def validate_test_type(test_type: str) -> TestType:
    try:
        return TestType(test_type)
    except ValueError:
        allowed = ", ".join(t.value for t in TestType)
        raise InvalidInputError(
            f"Unknown test type {test_type!r} (expected one of: {allowed})", field="test_type", value=str(test_type),
        ) from None


def validate_mode(mode: str) -> str:
    if mode not in MODES:
        raise InvalidInputError(
            f"Unknown mode {mode!r} (expected one of: {', '.join(MODES)})", field="mode", value=mode,
        )
    return mode


def validate_timeout(timeout_ms: int) -> int:
    if not MIN_TIMEOUT_MS <= int(timeout_ms) <= MAX_TIMEOUT_MS:
        raise InvalidInputError(
            f"Timeout must be between {MIN_TIMEOUT_MS} and {MAX_TIMEOUT_MS} ms", field="timeout", value=str(timeout_ms),
        )
    return int(timeout_ms)

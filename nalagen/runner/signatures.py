"""Known failure signatures in test-runner output.

SIGNATURES is checked top to bottom and every matching row is reported.
Rows marked remediable can be repaired by re-extracting live properties
and rewriting the page object; nothing else is ever patched.
"""

import re
from typing import Callable, NamedTuple, Optional

from nalagen.types import ClassifiedError, ErrorKind, TestRunSummary

_FILE_FROM_STACK = re.compile(r"at\s+(.+\.js):(\d+):(\d+)")
_SELECTOR_FROM_LOCATOR = re.compile(r"locator\('([^']+)'\)")
_PASSED = re.compile(r"(\d+) passed")
_FAILED = re.compile(r"(\d+) failed")
_SKIPPED = re.compile(r"(\d+) skipped")

NALA_SUCCESS_MARKER = "Nala tests exited with code 0"
CLEANUP_MARKER = "Cleanup failed"


def _file_from_stack(output: str) -> Optional[str]:
    match = _FILE_FROM_STACK.search(output)
    return match.group(1).strip() if match else None


def _selector_from_locator(output: str) -> Optional[str]:
    match = _SELECTOR_FROM_LOCATOR.search(output)
    return match.group(1) if match else None


class Signature(NamedTuple):
    kind: ErrorKind
    message: str
    matches: Callable[[str], bool]
    detail: Optional[Callable[[str], Optional[str]]] = None
    remediable: bool = False


SIGNATURES: tuple[Signature, ...] = (
    Signature(
        ErrorKind.AUTHENTICATION,
        "Authentication failed - may need to log in manually",
        lambda out: "authenticate" in out and "failed" in out and CLEANUP_MARKER not in out,
    ),
    Signature(
        ErrorKind.MISSING_CSS_PROPERTIES,
        "CSS properties are not defined in page object",
        lambda out: "Cannot convert undefined or null to object" in out,
        detail=_file_from_stack,
        remediable=True,
    ),
    Signature(
        ErrorKind.INVALID_SELECTOR,
        "Element selector not found on page",
        lambda out: "locator." in out and "resolved to" in out,
        detail=_selector_from_locator,
        remediable=True,
    ),
    Signature(
        ErrorKind.TIMEOUT,
        "Test timed out waiting for element or action",
        lambda out: "Timeout" in out or "exceeded" in out,
    ),
    Signature(
        ErrorKind.CLEANUP,
        "Test cleanup failed - this can be ignored",
        lambda out: CLEANUP_MARKER in out,
    ),
    Signature(
        ErrorKind.CSS_MISMATCH,
        "CSS properties do not match expected values",
        lambda out: "Expected" in out and "toBeTruthy" in out,
    ),
)

REMEDIABLE_KINDS = frozenset(s.kind for s in SIGNATURES if s.remediable)


def classify(output: str) -> list[ClassifiedError]:
    """Every signature that matches ``output``, in table order."""
    errors = []
    for signature in SIGNATURES:
        if signature.matches(output):
            errors.append(ClassifiedError(
                kind=signature.kind,
                message=signature.message,
                detail=signature.detail(output) if signature.detail else None,
                remediable=signature.remediable,
            ))
    return errors


def classify_failure(output: str) -> list[ClassifiedError]:
    """Like classify, but a failure nothing recognises is reported as unknown."""
    errors = classify(output)
    if not errors:
        tail = output.strip().splitlines()[-1] if output.strip() else "no output"
        errors.append(ClassifiedError(kind=ErrorKind.UNKNOWN, message=tail[:300]))
    return errors


def summarize_run(output: str, exit_code: Optional[int]) -> TestRunSummary:
    """Pass/fail counts and the success verdict for one run's output.

    A run succeeds when it exits cleanly with nothing failed and no failure
    signature other than cleanup noise. A run whose only problem is a
    cleanup failure also counts as a success.
    """
    passed = _count(_PASSED, output)
    failed = _count(_FAILED, output)
    skipped = _count(_SKIPPED, output)
    errors = classify(output)

    exited_ok = exit_code == 0 or NALA_SUCCESS_MARKER in output
    blocking = [e for e in errors if e.kind != ErrorKind.CLEANUP]
    only_cleanup = (
        CLEANUP_MARKER in output
        and "Test failed" not in output
        and failed == 0
        and not blocking
    )
    success = (exited_ok and failed == 0 and not blocking) or only_cleanup
    if not success and not errors:
        errors = classify_failure(output)

    return TestRunSummary(
        success=success,
        passed=passed,
        failed=failed,
        skipped=skipped,
        exit_code=exit_code,
        errors=[] if success else errors,
        output=output,
    )


def _count(pattern: re.Pattern, output: str) -> int:
    match = pattern.search(output)
    return int(match.group(1)) if match else 0

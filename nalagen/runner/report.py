"""Markdown report for a workflow run."""

from nalagen.types import AutoFixResult, ValidationReport, WorkflowResult

MAX_OUTPUT_CHARS = 4000


def _bullets(lines: list[str]) -> str:
    return "".join(f"- {line}\n" for line in lines)


def _validation_section(validation: ValidationReport) -> str:
    section = "## File Validation\n\n"
    section += f"**Status**: {'✅ Valid' if validation.valid else '❌ Invalid'}\n"
    if validation.errors:
        section += "**Errors**:\n" + _bullets(validation.errors)
    if validation.warnings:
        section += "**Warnings**:\n" + _bullets(validation.warnings)
    return section + "\n"


def _autofix_section(autofix: AutoFixResult) -> str:
    section = "## Auto-Fix\n\n"
    section += f"**Attempts**: {autofix.attempts}\n"
    for attempt in autofix.history:
        kinds = ", ".join(e.kind.value for e in attempt.classified_errors) or "none"
        patches = ", ".join(attempt.patches_applied) or "none"
        section += f"- Attempt {attempt.attempt_number}: errors {kinds}; patches {patches}\n"
    if autofix.last_errors:
        section += "**Remaining errors**:\n" + _bullets(
            [f"{e.kind.value}: {e.message}" + (f" ({e.detail})" if e.detail else "") for e in autofix.last_errors]
        )
    return section + "\n"


def generate_test_report(result: WorkflowResult) -> str:
    report = "\n📊 **Test Execution Report**\n\n"
    report += f"**Overall Result**: {'✅ PASSED' if result.success else '❌ FAILED'}\n"
    report += f"**Duration**: {result.duration_ms}ms\n"
    report += f"**Phase**: {result.phase}\n\n"

    if result.written:
        report += "## Generated Files\n\n"
        report += _bullets([
            f"{'✅' if r.success else '❌'} {r.path}" + (f" ({r.error})" if r.error else "")
            for r in result.written
        ])
        report += "\n"

    if result.validation:
        report += _validation_section(result.validation)

    if result.execution:
        execution = result.execution
        report += "## Test Execution\n\n"
        report += f"**Status**: {'✅ Passed' if execution.success else '❌ Failed'}\n"
        report += f"**Passed**: {execution.passed}  **Failed**: {execution.failed}  **Skipped**: {execution.skipped}\n"
        if execution.errors:
            report += "**Errors**:\n" + _bullets([f"{e.kind.value}: {e.message}" for e in execution.errors])
        if execution.output:
            output = execution.output[-MAX_OUTPUT_CHARS:]
            report += f"\n**Output**:\n```\n{output}\n```\n"
        report += "\n"

    if result.autofix:
        report += _autofix_section(result.autofix)

    report += f"\n**Summary**: {result.summary}\n"
    return report

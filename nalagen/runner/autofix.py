"""Run generated tests, repair the page object from the live card, retry.

Each attempt runs the test command once. A failed run is classified; if any
error is remediable and attempts remain, properties are re-extracted from
the rendered card and the page object is rewritten before the next run.
Failures nothing can repair still use up their attempt.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from nalagen.exceptions import ExtractionError, TestCommandError
from nalagen.runner.command import TestRunner
from nalagen.runner.extractor import PropertyExtractor
from nalagen.runner.patcher import patch_page_object
from nalagen.runner.signatures import summarize_run
from nalagen.types import AutoFixResult, ClassifiedError, ExtractedElement, RunAttempt

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3

Patcher = Callable[[Path, dict[str, ExtractedElement]], list[str]]


class AutoFixRunner:
    """Bounded run → classify → patch loop for one page object.

    Args:
        runner: executes the test command
        extractor: reads live properties for the card under test
        page_object_path: file rewritten on remediable failures
        max_attempts: total test runs allowed
        patcher: applies an extraction to the page object
    """

    def __init__(
        self,
        runner: TestRunner,
        extractor: PropertyExtractor,
        page_object_path: Path,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        patcher: Optional[Patcher] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.runner = runner
        self.extractor = extractor
        self.page_object_path = Path(page_object_path)
        self.max_attempts = max_attempts
        self.patcher = patcher or patch_page_object

    async def run_and_fix(
        self,
        tag: str,
        component_id: str,
        branch: str = "local",
        mode: str = "headless",
        milolibs: str = "local",
    ) -> AutoFixResult:
        history: list[RunAttempt] = []
        last_errors: list[ClassifiedError] = []

        for attempt in range(1, self.max_attempts + 1):
            logger.info("Attempt %d/%d: running %s", attempt, self.max_attempts, tag)
            try:
                output = await self.runner.run(tag, branch, mode, milolibs)
            except TestCommandError as exc:
                logger.error("Attempt %d could not start the test command: %s", attempt, exc.message)
                history.append(RunAttempt(attempt_number=attempt, test_output=exc.message))
                last_errors = []
                continue

            summary = summarize_run(output.text, output.exit_code)
            record = RunAttempt(
                attempt_number=attempt,
                test_output=output.text,
                classified_errors=summary.errors,
            )
            history.append(record)

            if summary.success:
                logger.info("Tests passed on attempt %d", attempt)
                return AutoFixResult(success=True, attempts=attempt, history=history)

            last_errors = summary.errors
            logger.warning(
                "Attempt %d failed: %s", attempt, ", ".join(e.kind.value for e in last_errors),
            )
            if attempt == self.max_attempts:
                break
            if not any(e.remediable for e in last_errors):
                logger.info("No fixable errors detected")
                continue

            record.patches_applied = await self._repair(component_id, branch, milolibs)

        return AutoFixResult(
            success=False,
            attempts=self.max_attempts,
            last_errors=last_errors,
            history=history,
        )

    async def _repair(self, component_id: str, branch: str, milolibs: str) -> list[str]:
        logger.info("Extracting live properties for %s", component_id)
        try:
            extracted = await self.extractor.extract(component_id, branch, milolibs)
        except ExtractionError as exc:
            logger.error("Failed to extract properties: %s", exc.message)
            return []
        try:
            applied = self.patcher(self.page_object_path, extracted)
        except OSError as exc:
            logger.error("Failed to update %s: %s", self.page_object_path, exc)
            return []
        logger.info("Page object updated (%d changes); retrying", len(applied))
        return applied

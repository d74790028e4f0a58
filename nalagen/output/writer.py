"""Persist generated artifacts. Each file succeeds or fails on its own."""

import logging
from pathlib import Path
from typing import Iterable

from nalagen.types import GeneratedArtifact, WriteResult

logger = logging.getLogger(__name__)


class FileOutput:
    """Writes artifacts to disk, overwriting whatever is there.

    Args:
        dry_run: report what would be written without touching the disk
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def write(self, path: Path, content: str) -> WriteResult:
        path = Path(path)
        if self.dry_run:
            return WriteResult(path=str(path), success=True, message=f"Would write {path}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            return WriteResult(
                path=str(path), success=False, error=str(exc), message=f"Failed to save file: {exc}",
            )
        logger.debug("Wrote %s (%d bytes)", path, len(content))
        return WriteResult(path=str(path), success=True, message=f"File saved to: {path}")

    def write_all(self, artifacts: Iterable[GeneratedArtifact]) -> list[WriteResult]:
        return [self.write(Path(a.path), a.content) for a in artifacts]


def summarize(results: list[WriteResult]) -> dict:
    """Counts plus the failing paths, for CLI and report output."""
    failed = [r for r in results if not r.success]
    return {
        "total": len(results),
        "written": len(results) - len(failed),
        "failed": len(failed),
        "failures": {r.path: r.error for r in failed},
    }

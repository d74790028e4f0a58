"""Output layout and file persistence."""

from nalagen.output.paths import ArtifactPaths, PathResolver
from nalagen.output.writer import FileOutput, summarize

__all__ = ["ArtifactPaths", "FileOutput", "PathResolver", "summarize"]

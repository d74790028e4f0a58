"""Surface classification: map a variant name onto a rendering surface.

Patterns are simple ``*`` wildcards matched against the whole name. They
are tried in the order given and the first hit wins, so overlapping rules
must be listed most-specific first. No case folding or trimming is done.
"""

import re
from functools import lru_cache
from typing import Optional

from nalagen.types import SurfaceRules

# Naming conventions that hold across MAS projects. Project rules are
# consulted before these.
BUILTIN_SURFACE_RULES = SurfaceRules(
    patterns={
        "ccd-*": "ccd",
        "ah-*": "adobe-home",
        "fries": "commerce",
        "*express*": "express",
    },
    default="acom",
)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern:
    """Translate a ``*`` wildcard into an anchored regex."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


def classify(name: str, rules: SurfaceRules) -> str:
    """Return the surface for ``name``. Never raises."""
    for pattern, surface in rules.patterns.items():
        if compile_pattern(pattern).fullmatch(name):
            return surface
    return rules.default


def effective_rules(project_rules: Optional[SurfaceRules]) -> SurfaceRules:
    """Project rules first, then the builtin conventions."""
    if project_rules is None:
        return BUILTIN_SURFACE_RULES
    return project_rules.merged_with(BUILTIN_SURFACE_RULES)

"""Identifier helpers shared by the registry and the generators."""

import re

_HYPHEN_LOWER = re.compile(r"-([a-z])")


def capitalize(word: str) -> str:
    """Upper-case the first character only; the rest is left alone."""
    return word[:1].upper() + word[1:]


def title_words(name: str, sep: str = " ") -> str:
    """``plans-students`` → ``Plans Students``."""
    return sep.join(capitalize(w) for w in name.split("-"))


def pascal_case(name: str) -> str:
    """``try-buy-widget`` → ``TryBuyWidget``."""
    return title_words(name, sep="")


def camel_case(name: str) -> str:
    """``background-image`` → ``backgroundImage``. Already-camel names pass through."""
    return _HYPHEN_LOWER.sub(lambda m: m.group(1).upper(), name)


def variable_name(name: str) -> str:
    """JS variable for a component: hyphens dropped, ``try-buy`` → ``trybuy``."""
    return name.replace("-", "")

"""Variant catalog, surface classification, discovery, and the registry."""

from nalagen.variants.discovery import DirectoryLister, DiscoveryCache, FilesystemLister
from nalagen.variants.registry import VariantRegistry
from nalagen.variants.surfaces import BUILTIN_SURFACE_RULES, classify, effective_rules

__all__ = [
    "BUILTIN_SURFACE_RULES",
    "DirectoryLister",
    "DiscoveryCache",
    "FilesystemLister",
    "VariantRegistry",
    "classify",
    "effective_rules",
]

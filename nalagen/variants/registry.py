"""Variant registry — the set of component variant names a project knows about.

Entries come from four places, in load order:
  1. The bundled catalog (defaults/variants.yaml)          origin=builtin
  2. ``variants`` in the project's .nala-mcp.json           origin=custom
  3. ``*.js`` files in <project>/web-components/src/variants origin=discovered
  4. Any other name a command is asked about                origin=dynamic

The registry is permissive: ``is_valid`` never rejects a name. Catalog,
config, discovery, and save failures are logged and the registry carries on
with whatever it already holds.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import yaml
from pydantic import ValidationError

from nalagen.config.loader import CONFIG_FILENAME, load_variant_catalog, read_json, write_json
from nalagen.config.schema import ProjectSettings
from nalagen.exceptions import ConfigError
from nalagen.naming import title_words
from nalagen.types import (
    DEFAULT_TEST_TYPES,
    DiscoveryResult,
    SurfaceRules,
    TestType,
    VariantDescriptor,
    VariantOrigin,
)
from nalagen.variants.discovery import DirectoryLister, DiscoveryCache, FilesystemLister, scan_variants
from nalagen.variants.surfaces import classify, effective_rules

logger = logging.getLogger(__name__)

# Catalog pseudo-entry meaning "every variant"; never registered.
_ALL_VARIANTS = "all"


class VariantRegistry:
    """Registry of variant descriptors for one project.

    Args:
        settings: resolved project settings (root, variants, surface rules)
        catalog_path: override for the bundled variants.yaml
        lister: filesystem access for discovery
        clock: monotonic seconds, used for the discovery cache
        ttl_seconds: how long a discovery scan stays fresh
    """

    def __init__(
        self,
        settings: ProjectSettings,
        catalog_path: Optional[Path] = None,
        lister: Optional[DirectoryLister] = None,
        clock: Callable[[], float] = time.monotonic,
        ttl_seconds: float = 60.0,
    ):
        self.settings = settings
        self.catalog_path = catalog_path
        self.lister = lister or FilesystemLister()
        self.rules: SurfaceRules = effective_rules(settings.surface_rules)
        self._cache = DiscoveryCache(ttl_seconds=ttl_seconds, clock=clock)
        self._variants: dict[str, VariantDescriptor] = {}
        self._initialized = False

    # ─── Lifecycle ──────────────────────────────────────────────────────

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, discover: bool = True) -> None:
        """Load catalog, then config, then discovery. Second call is a no-op.

        With ``discover=False`` the directory scan is left to the caller.
        """
        if self._initialized:
            return
        self._load_builtin()
        self._load_custom()
        if discover:
            self.discover(force=True)
        self._initialized = True
        logger.debug("Variant registry initialized with %d variants", len(self._variants))

    def dispose(self) -> None:
        self._variants.clear()
        self._cache.invalidate()
        self._initialized = False

    # ─── Mutation ───────────────────────────────────────────────────────

    def register(
        self,
        name: str,
        label: Optional[str] = None,
        surface: Optional[str] = None,
        test_types: Optional[list[TestType]] = None,
        selectors: Optional[dict[str, str]] = None,
        origin: VariantOrigin = VariantOrigin.CUSTOM,
        source_path: Optional[str] = None,
    ) -> VariantDescriptor:
        """Insert or overwrite ``name``. Missing fields get defaults."""
        descriptor = VariantDescriptor(
            name=name,
            label=label or title_words(name),
            surface=surface or self.detect_surface(name),
            test_types=list(test_types) if test_types else list(DEFAULT_TEST_TYPES),
            selectors=dict(selectors or {}),
            origin=origin,
            source_path=source_path,
        )
        self._variants[name] = descriptor
        return descriptor

    def remove(self, name: str) -> bool:
        """Drop ``name``. Returns whether it was present."""
        return self._variants.pop(name, None) is not None

    # ─── Queries ────────────────────────────────────────────────────────

    def has(self, name: str) -> bool:
        return name in self._variants

    def get(self, name: str) -> Optional[VariantDescriptor]:
        return self._variants.get(name)

    def all_names(self) -> list[str]:
        return list(self._variants)

    def all_variants(self) -> list[VariantDescriptor]:
        return list(self._variants.values())

    def by_origin(self, origin: VariantOrigin) -> list[VariantDescriptor]:
        return [v for v in self._variants.values() if v.origin == origin]

    def detect_surface(self, name: str) -> str:
        return classify(name, self.rules)

    def surface_for(self, name: str) -> str:
        """Registered surface for ``name``, else the classifier's answer."""
        descriptor = self._variants.get(name)
        return descriptor.surface if descriptor else self.detect_surface(name)

    def is_valid(self, name: str) -> bool:
        """Always True. Unknown names are registered as discovered or dynamic."""
        if self.has(name):
            return True
        if self.check_for_new_variant(name) is not None:
            return True
        logger.warning("Variant '%s' not found in project. Using dynamic configuration.", name)
        self.register(name, origin=VariantOrigin.DYNAMIC)
        return True

    # ─── Discovery ──────────────────────────────────────────────────────

    def check_for_new_variant(self, name: str) -> Optional[VariantDescriptor]:
        """Register ``name`` as discovered if its source file exists."""
        source = self.settings.variants_dir / f"{name}.js"
        try:
            found = self.lister.exists(source)
        except OSError as exc:
            logger.warning("Could not check %s: %s", source, exc)
            return None
        if not found:
            return None
        logger.info("Discovered variant '%s' at %s", name, source)
        return self.register(name, origin=VariantOrigin.DISCOVERED, source_path=str(source))

    def discover(self, force: bool = False) -> DiscoveryResult:
        """Scan the project's variants directory for unregistered names.

        A scan within the cache TTL is skipped unless ``force`` is set.
        """
        if not force and self._cache.is_fresh():
            return DiscoveryResult(skipped=list(self._cache.names), cached=True)

        directory = self.settings.variants_dir
        try:
            names = scan_variants(self.lister, directory)
        except OSError as exc:
            logger.info("Variants directory not available (%s): %s", directory, exc)
            self._cache.store([])
            return DiscoveryResult(error=str(exc))

        result = DiscoveryResult()
        for name in names:
            if self.has(name):
                result.skipped.append(name)
                continue
            self.register(
                name,
                origin=VariantOrigin.DISCOVERED,
                source_path=str(directory / f"{name}.js"),
            )
            result.discovered.append(name)
        self._cache.store(names)
        if result.discovered:
            logger.info("Discovered %d new variants: %s", len(result.discovered), ", ".join(result.discovered))
        return result

    # ─── Persistence ────────────────────────────────────────────────────

    def save_to_config(self, path: Optional[Path] = None) -> bool:
        """Write custom variants and surface rules into the project file.

        Other keys in the file are preserved. Returns False (and logs) on
        any read or write failure.
        """
        path = Path(path or self.settings.config_path or Path.cwd() / CONFIG_FILENAME)
        custom = {
            v.name: {
                "label": v.label,
                "surface": v.surface,
                "testTypes": [t.value for t in v.test_types],
                "selectors": v.selectors,
            }
            for v in self.by_origin(VariantOrigin.CUSTOM)
        }
        rules = self.settings.surface_rules or SurfaceRules()
        try:
            data = read_json(path)
            target = data
            if self.settings.name and self.settings.name in data.get("projects", {}):
                target = data["projects"][self.settings.name]
            target["variants"] = custom
            target["surfaceRules"] = rules.model_dump(by_alias=True)
            write_json(path, data)
        except (OSError, ConfigError) as exc:
            logger.error("Error saving variants to %s: %s", path, exc)
            return False
        logger.info("Saved %d custom variants to %s", len(custom), path)
        return True

    # ─── Internal ───────────────────────────────────────────────────────

    def _load_builtin(self) -> None:
        try:
            catalog = load_variant_catalog(self.catalog_path)
        except (OSError, yaml.YAMLError, ValidationError) as exc:
            logger.error("Error loading default variants: %s", exc)
            return
        for entry in catalog.variants:
            if entry.value == _ALL_VARIANTS:
                continue
            self.register(
                entry.value,
                label=entry.label,
                surface=entry.surface,
                origin=VariantOrigin.BUILTIN,
            )

    def _load_custom(self) -> None:
        for name, entry in self.settings.variants.items():
            self.register(
                name,
                label=entry.label,
                surface=entry.surface,
                test_types=entry.test_types,
                selectors=entry.selectors,
                origin=VariantOrigin.CUSTOM,
            )

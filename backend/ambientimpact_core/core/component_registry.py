"""
Component Registry - Main Registry System
Flow: Definitions (cached) → Lazy instances → Libraries / JS settings / HTML
"""

import fnmatch
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import structlog

from ambientimpact_core.core.cache import CacheBackend
from ambientimpact_core.core.component_base import (
    ComponentBase,
    ComponentContext,
    ComponentDefinition,
)
from ambientimpact_core.core.component_discovery import ComponentDiscovery
from ambientimpact_core.core.library_descriptor import LibraryDescriptor
from ambientimpact_core.core.nested import merge_deep

logger = structlog.get_logger()

DEFINITIONS_CACHE_ID = "ambientimpact_component_info"
# Components are closely tied to libraries, so library info invalidation
# also forces rediscovery.
DEFINITIONS_CACHE_TAGS = ("ambientimpact_component_info", "library_info")


def camelize_component_id(component_id: str) -> str:
    """
    Convert a dotted, underscored id to dotted lowerCamelCase.

    Each dot-separated segment is converted independently:
    'image_viewer.sub_component' -> 'imageViewer.subComponent'.
    """
    camelized = []
    for part in component_id.split("."):
        words = part.replace("_", " ").split(" ")
        joined = "".join(word[:1].upper() + word[1:] for word in words)
        camelized.append(joined[:1].lower() + joined[1:])
    return ".".join(camelized)


def _merge_library(existing: LibraryDescriptor, library: LibraryDescriptor) -> LibraryDescriptor:
    merged = merge_deep(existing, library)
    if "dependencies" in merged:
        # Each side may carry the framework dependency.
        merged["dependencies"] = list(dict.fromkeys(merged["dependencies"]))
    return merged


class ComponentRegistry:
    """
    Registry of component definitions and their lazily built instances.

    A registry is meant to live for one request: instances are memoized for
    its lifetime, while definitions and rendered HTML are held in the shared
    cache backends.

    Core Process:
    1. get_definitions() → cached discovery results in discovery order
    2. get_instance() → construct once per id, then reuse
    3. collect_*() → aggregate instance output for the front-end
    """

    def __init__(
        self,
        discovery: ComponentDiscovery,
        context: ComponentContext,
        definitions_cache: Optional[CacheBackend] = None,
    ):
        self._discovery = discovery
        self._context = context
        self._definitions_cache = definitions_cache
        self._definitions: Optional[Dict[str, ComponentDefinition]] = None
        self._instances: Dict[str, ComponentBase] = {}
        self.logger = logger.bind(registry_id="component_registry")

    @property
    def context(self) -> ComponentContext:
        return self._context

    # Definitions

    def get_definitions(self) -> Dict[str, ComponentDefinition]:
        if self._definitions is not None:
            return self._definitions

        if self._definitions_cache is not None:
            item = self._definitions_cache.get(DEFINITIONS_CACHE_ID)
            if item is not None:
                self._definitions = item.data
                return self._definitions

        self._definitions = self._discovery.get_definitions()

        if self._definitions_cache is not None:
            self._definitions_cache.set(
                DEFINITIONS_CACHE_ID,
                self._definitions,
                tags=DEFINITIONS_CACHE_TAGS,
            )

        return self._definitions

    def clear_cached_definitions(self) -> None:
        self._definitions = None
        self._instances.clear()
        if self._definitions_cache is not None:
            self._definitions_cache.delete(DEFINITIONS_CACHE_ID)
        self.logger.info("Component definitions cleared")

    def get_definition(self, component_id: str) -> Optional[ComponentDefinition]:
        """Definition for the id, or None so callers can skip silently."""
        return self.get_definitions().get(component_id)

    # Instances

    def get_instance(
        self,
        component_id: str,
        configuration: Optional[Dict[str, Any]] = None,
    ) -> Optional[ComponentBase]:
        """
        Memoized instance for the id, or None if no such component exists.

        Configuration overrides only apply on first construction.
        """
        if component_id in self._instances:
            return self._instances[component_id]

        definition = self.get_definition(component_id)
        if definition is None:
            return None

        instance = definition.component_class(
            configuration or {},
            component_id,
            definition,
            self._context,
        )
        self._instances[component_id] = instance
        self.logger.debug("Component instance created", component_id=component_id)

        return instance

    def get_configuration(self, component_id: str) -> Dict[str, Any]:
        instance = self.get_instance(component_id)
        if instance is None:
            return {}
        return instance.get_configuration()

    def _iter_instances(self) -> Iterable[tuple[str, ComponentBase]]:
        for component_id in self.get_definitions():
            instance = self.get_instance(component_id)
            if instance is None:
                continue
            yield component_id, instance

    # Aggregation

    def collect_libraries(self, provider: Optional[str] = None) -> Dict[str, LibraryDescriptor]:
        """
        Libraries of every component, or of one provider's components, merged.

        A library name declared by more than one component is deep-merged in
        discovery order, so conflicting leaf values come from the last one.
        """
        libraries: Dict[str, LibraryDescriptor] = {}
        owners: Dict[str, str] = {}

        for component_id, instance in self._iter_instances():
            if provider is not None and instance.definition.provider != provider:
                continue
            for name, library in instance.get_libraries().items():
                if name in libraries:
                    self.logger.warning(
                        "Library declared by more than one component, merging",
                        library=name,
                        previous_component=owners[name],
                        component_id=component_id,
                    )
                libraries[name] = _merge_library(libraries.get(name, {}), library)
                owners[name] = component_id

        return libraries

    def collect_js_settings(self) -> Dict[str, Any]:
        js_settings: Dict[str, Any] = {}

        for component_id, instance in self._iter_instances():
            settings = instance.get_js_settings()
            if not settings:
                continue
            js_settings[camelize_component_id(component_id)] = settings

        return js_settings

    def collect_html(self) -> Dict[str, str]:
        html: Dict[str, str] = {}

        for component_id, instance in self._iter_instances():
            instance_html = instance.get_html()
            if not instance_html:
                continue
            html[camelize_component_id(component_id)] = instance_html

        return html

    def get_component_names_with_html(self) -> List[str]:
        return [
            camelize_component_id(component_id)
            for component_id, instance in self._iter_instances()
            if instance.has_html()
        ]

    @property
    def html_endpoint_path(self) -> str:
        return self._context.settings.HTML_ENDPOINT_PATH

    # Providers

    def resolve_component_paths(self, provider_filters: Iterable[str] = ()) -> List[str]:
        """
        Component directories of providers owning at least one component.

        Filters match a provider name exactly, or as a glob when they
        contain '*'. Providers that are not active are skipped.
        """
        provider_filters = list(provider_filters)
        patterns = [name for name in provider_filters if "*" in name]
        providers: List[str] = []

        for definition in self.get_definitions().values():
            provider = definition.provider
            if provider in providers:
                continue

            if not provider_filters or provider in provider_filters:
                providers.append(provider)
                continue

            if any(fnmatch.fnmatchcase(provider, pattern) for pattern in patterns):
                providers.append(provider)

        paths = []
        module_handler = self._context.module_handler
        for provider in providers:
            module = module_handler.get_module(provider)
            if module is None:
                continue
            paths.append(str(Path(module.path) / self._context.settings.COMPONENTS_DIRECTORY))

        return paths

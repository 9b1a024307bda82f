"""
Component Service
Flow: App-wide collaborators → per-request registry → aggregated front-end data
"""

from functools import lru_cache
from typing import Any, Dict, Iterable, Optional

import structlog
from fastapi import Depends

from ambientimpact_core.config.settings import Settings, get_settings
from ambientimpact_core.core.cache import CacheBackend, MemoryCacheBackend
from ambientimpact_core.core.component_base import ComponentContext
from ambientimpact_core.core.component_discovery import ComponentDiscovery
from ambientimpact_core.core.component_registry import ComponentRegistry
from ambientimpact_core.core.events import EventDispatcher
from ambientimpact_core.core.language import LanguageManager
from ambientimpact_core.core.modules import ModuleHandler
from ambientimpact_core.core.rendering import Renderer
from ambientimpact_core.services.library_info import (
    Libraries,
    alter_library_info,
    register_library_subscribers,
)
from ambientimpact_core.services.markup_processor import MarkupProcessor

logger = structlog.get_logger()


class ComponentService:
    """
    Owns the collaborators shared across requests.

    Registries are cheap and short-lived; create one per request with
    create_registry(). The definition and HTML caches outlive them.
    """

    def __init__(
        self,
        settings: Settings,
        module_handler: Optional[ModuleHandler] = None,
        html_cache: Optional[CacheBackend] = None,
        definitions_cache: Optional[CacheBackend] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        discovery: Optional[ComponentDiscovery] = None,
        renderer: Optional[Renderer] = None,
    ):
        self.settings = settings
        self.module_handler = module_handler or ModuleHandler.from_settings(settings)
        self.html_cache = html_cache or MemoryCacheBackend("ambientimpact_component_html")
        self.definitions_cache = definitions_cache or MemoryCacheBackend("discovery")
        self.event_dispatcher = event_dispatcher or EventDispatcher()
        self.language_manager = LanguageManager(settings.DEFAULT_LANGUAGE, settings.LANGUAGES)
        self.renderer = renderer or Renderer()
        self.discovery = discovery or ComponentDiscovery(
            self.module_handler,
            self.event_dispatcher,
            manifest_path=settings.COMPONENT_MANIFEST,
        )
        self.markup_processor = MarkupProcessor(self.event_dispatcher)

        register_library_subscribers(
            self.event_dispatcher,
            self.module_handler,
            lambda provider: self.create_registry().collect_libraries(provider),
        )

    def create_context(self) -> ComponentContext:
        return ComponentContext(
            settings=self.settings,
            module_handler=self.module_handler,
            language_manager=self.language_manager,
            renderer=self.renderer,
            html_cache=self.html_cache,
        )

    def create_registry(self) -> ComponentRegistry:
        return ComponentRegistry(
            self.discovery,
            self.create_context(),
            definitions_cache=self.definitions_cache,
        )

    def get_library_info(self, extension: str, libraries: Optional[Libraries] = None) -> Libraries:
        return alter_library_info(self.event_dispatcher, extension, libraries or {})

    def get_front_end_settings(self, registry: ComponentRegistry) -> Dict[str, Any]:
        """Everything the client runtime needs to wire up components."""
        return {
            "components": registry.collect_js_settings(),
            "componentsWithHTML": registry.get_component_names_with_html(),
            "htmlEndpoint": registry.html_endpoint_path,
        }

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        tags = list(tags)
        removed = self.definitions_cache.invalidate_tags(tags)
        removed += self.html_cache.invalidate_tags(tags)
        return removed

    def rebuild_caches(self) -> None:
        """Forget discovered definitions and all rendered HTML."""
        self.definitions_cache.delete_all()
        self.html_cache.delete_all()
        logger.info("Component caches rebuilt")


@lru_cache()
def get_component_service() -> ComponentService:
    """Get cached service instance."""
    return ComponentService(get_settings())


def get_component_registry(
    service: ComponentService = Depends(get_component_service),
) -> ComponentRegistry:
    """FastAPI dependency: a fresh registry for each request."""
    return service.create_registry()

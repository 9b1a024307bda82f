"""
┌─────────────────────────────────────────────────────────────┐
│                   Component Process Flow                    │
│                                                             │
│  [Definition] → [Configure] → [Libraries] → [HTML] → [JS]   │
│                                                             │
│  Configuration: base defaults < component defaults < caller │
│  HTML: template? → cache hit? → render → store              │
└─────────────────────────────────────────────────────────────┘

Base Component System for Ambient.Impact Core
Flow: Component initialization → Configuration merge → Asset/HTML/settings output
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Type

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ambientimpact_core.config.settings import Settings
from ambientimpact_core.core.cache import PERMANENT, CacheBackend
from ambientimpact_core.core.exceptions import CacheBackendError
from ambientimpact_core.core.language import LanguageManager
from ambientimpact_core.core.library_descriptor import (
    LibraryDescriptor,
    load_library_file,
    normalize_libraries,
)
from ambientimpact_core.core.modules import ModuleHandler
from ambientimpact_core.core.nested import merge_deep
from ambientimpact_core.core.rendering import Renderer

logger = structlog.get_logger()


class ComponentDefinition(BaseModel):
    """Immutable component metadata, keyed by id within a provider."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(..., description="Unique component identifier")
    provider: str = Field(..., description="Provider (module) that declares the component")
    title: str = Field(default="", description="Human-readable title")
    description: str = Field(default="", description="Component description")
    component_class: Type["ComponentBase"] = Field(..., exclude=True)

    def summary(self) -> Dict[str, str]:
        return self.model_dump(include={"id", "provider", "title", "description"})


class HTMLCacheSettings(BaseModel):
    """How long rendered HTML is kept and which tags invalidate it."""
    max_age: float = Field(default=PERMANENT)
    tags: list[str] = Field(default_factory=list)


@dataclass
class ComponentContext:
    """Services handed to every component instance."""
    settings: Settings
    module_handler: ModuleHandler
    language_manager: LanguageManager
    renderer: Renderer
    html_cache: CacheBackend


class ComponentBase:
    """
    Base class for component plug-ins.

    Subclasses override default_configuration(), get_js_settings(),
    get_html_cache_settings() and get_demo() as needed. Assets live in the
    component directory, `<provider root>/<path>`:

    - `<id>.libraries.yml`: library descriptors
    - `<id>.html.j2`: HTML template for the front-end
    """

    # Relative to the provider root; built from the components directory and
    # the plug-in id when left empty.
    path: str = ""

    def __init__(
        self,
        configuration: Dict[str, Any],
        plugin_id: str,
        definition: ComponentDefinition,
        context: ComponentContext,
    ):
        self.plugin_id = plugin_id
        self.definition = definition
        self.context = context
        self.logger = logger.bind(component_id=plugin_id, provider=definition.provider)

        self.set_configuration(configuration)

        if not self.path:
            self.path = f"{context.settings.COMPONENTS_DIRECTORY}/{plugin_id}"

    # Configuration

    def base_configuration_defaults(self) -> Dict[str, Any]:
        return {"id": self.plugin_id}

    def default_configuration(self) -> Dict[str, Any]:
        return {}

    def get_configuration(self) -> Dict[str, Any]:
        return self.configuration

    def set_configuration(self, configuration: Dict[str, Any]) -> None:
        self.configuration = merge_deep(
            self.base_configuration_defaults(),
            self.default_configuration(),
            configuration,
        )

    # Paths

    def get_path(self, absolute: bool = False) -> str:
        if not absolute:
            return self.path

        module = self.context.module_handler.get_module(self.definition.provider)
        if module is None:
            raise LookupError(f"Provider is not active: {self.definition.provider}")
        return str(Path(module.path) / self.path)

    def _asset_path(self, suffix: str) -> Path:
        return Path(self.get_path(absolute=True)) / f"{self.definition.id}.{suffix}"

    # Libraries

    def get_libraries(self) -> Dict[str, LibraryDescriptor]:
        """Library descriptors with paths relative to the provider root."""
        libraries = load_library_file(
            self._asset_path(self.context.settings.LIBRARIES_FILE_SUFFIX)
        )
        if libraries is None:
            return {}

        return normalize_libraries(
            libraries,
            self.get_path(),
            self.context.settings.FRAMEWORK_LIBRARY,
        )

    # Front-end settings

    def get_js_settings(self) -> Dict[str, Any]:
        return {}

    # HTML

    @classmethod
    def get_html_cache_settings(cls) -> HTMLCacheSettings:
        """Override to set custom invalidation for this component's HTML."""
        return HTMLCacheSettings()

    def get_html_cache_id(self) -> str:
        language = self.context.language_manager.get_current_language()
        return f"{self.definition.provider}:{self.definition.id}:{language}"

    def get_html_path(self) -> Path:
        return self._asset_path(self.context.settings.TEMPLATE_FILE_SUFFIX)

    def get_html_template_variables(self) -> Dict[str, Any]:
        return {}

    def has_html(self) -> bool:
        return self.get_html_path().is_file()

    def get_cached_html(self) -> Optional[str]:
        """
        Cached HTML for the current language, or None.

        The backend is queried every time, so an invalidation is seen by
        long-lived instances. Read failures are treated as a miss.
        """
        cid = self.get_html_cache_id()
        try:
            item = self.context.html_cache.get(cid)
        except Exception as e:
            self.logger.warning("HTML cache read failed, treating as miss", cid=cid, error=str(e))
            return None

        if item is None or not item.data:
            return None
        return item.data

    def has_cached_html(self) -> bool:
        return self.get_cached_html() is not None

    def get_html(self) -> Optional[str]:
        """
        Rendered HTML for the front-end, or None without a template.
        """
        if not self.has_html():
            return None

        html = self.get_cached_html()
        if html is not None:
            return html

        source = self.get_html_path().read_text(encoding="utf-8")
        html = self.context.renderer.render_in_isolation(
            source, self.get_html_template_variables()
        )

        cid = self.get_html_cache_id()
        cache_settings = self.get_html_cache_settings()
        try:
            self.context.html_cache.set(cid, html, cache_settings.max_age, cache_settings.tags)
        except Exception as e:
            raise CacheBackendError(f"Could not cache component HTML: {e}", cid=cid) from e
        self.logger.info("Component HTML rendered and cached", cid=cid)

        return html

    # Demo

    def has_demo(self) -> bool:
        return type(self).get_demo is not ComponentBase.get_demo

    def get_demo(self) -> Dict[str, Any]:
        return {}


ComponentDefinition.model_rebuild()

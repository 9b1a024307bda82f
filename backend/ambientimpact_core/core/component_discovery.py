"""
Component Discovery Module
Flow: Registration table / manifest → Class resolution → Provider filter → Alter
"""

import importlib
import pkgutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

import structlog
import yaml

from ambientimpact_core.core.component_base import ComponentBase, ComponentDefinition
from ambientimpact_core.core.events import COMPONENT_INFO_ALTER, EventDispatcher
from ambientimpact_core.core.modules import ModuleHandler

logger = structlog.get_logger()

DEFAULT_PROVIDER = "ambientimpact_core"

# Explicit registration table filled by the @component decorator, in
# registration order.
_REGISTERED: Dict[str, ComponentDefinition] = {}


def component(
    id: str,
    title: str = "",
    description: str = "",
    provider: str = DEFAULT_PROVIDER,
) -> Callable[[Type[ComponentBase]], Type[ComponentBase]]:
    """Class decorator registering a component plug-in."""

    def decorator(cls: Type[ComponentBase]) -> Type[ComponentBase]:
        if not issubclass(cls, ComponentBase):
            raise TypeError(f"Component {id} must inherit from ComponentBase")

        if id in _REGISTERED:
            logger.warning("Overwriting existing component registration", component_id=id)

        _REGISTERED[id] = ComponentDefinition(
            id=id,
            provider=provider,
            title=title,
            description=description,
            component_class=cls,
        )
        return cls

    return decorator


def registered_components() -> Dict[str, ComponentDefinition]:
    return dict(_REGISTERED)


def _resolve_class(reference: str) -> Type[ComponentBase]:
    """Resolve a 'package.module:ClassName' reference."""
    module_name, _, class_name = reference.partition(":")
    if not class_name:
        raise ValueError(f"Class reference must look like 'module:Class': {reference}")

    cls = getattr(importlib.import_module(module_name), class_name)
    if not isinstance(cls, type) or not issubclass(cls, ComponentBase):
        raise ValueError(f"{reference} is not a ComponentBase subclass")
    return cls


def definitions_from_manifest(manifest: Mapping[str, Any]) -> Dict[str, ComponentDefinition]:
    """
    Build definitions from a parsed manifest.

    The manifest has a 'components' list whose entries carry id, class and
    optionally provider, title and description.
    """
    definitions: Dict[str, ComponentDefinition] = {}

    for entry in manifest.get("components") or []:
        definitions[entry["id"]] = ComponentDefinition(
            id=entry["id"],
            provider=entry.get("provider", DEFAULT_PROVIDER),
            title=entry.get("title", ""),
            description=entry.get("description", ""),
            component_class=_resolve_class(entry["class"]),
        )

    return definitions


def load_manifest(path: Path) -> Dict[str, ComponentDefinition]:
    with open(path, "r", encoding="utf-8") as f:
        return definitions_from_manifest(yaml.safe_load(f) or {})


@dataclass
class ComponentInfoAlterEvent:
    """Lets listeners add, remove or replace definitions before caching."""
    definitions: Dict[str, ComponentDefinition]


class ComponentDiscovery:
    """
    Produces the mapping of component id to definition.

    Discovery Process:
    1. import plug-in packages so their @component decorators run
    2. read the registration table, static definitions, then the manifest;
       later sources win on id collisions
    3. drop definitions whose provider is not active
    4. dispatch the component info alter event
    """

    def __init__(
        self,
        module_handler: ModuleHandler,
        event_dispatcher: Optional[EventDispatcher] = None,
        manifest_path: Optional[str] = None,
        plugin_packages: Iterable[str] = ("ambientimpact_core.plugins",),
        use_registration_table: bool = True,
        static_definitions: Iterable[ComponentDefinition] = (),
    ):
        self.module_handler = module_handler
        self.event_dispatcher = event_dispatcher
        self.manifest_path = Path(manifest_path) if manifest_path else None
        self.plugin_packages = list(plugin_packages)
        self.use_registration_table = use_registration_table
        self.static_definitions = list(static_definitions)
        self.logger = logger.bind(module="component_discovery")
        self._load_errors: List[str] = []

    def _import_plugin_packages(self) -> None:
        for package_name in self.plugin_packages:
            try:
                package = importlib.import_module(package_name)
            except ImportError as e:
                self._load_errors.append(f"Failed to import {package_name}: {e}")
                self.logger.warning("Plug-in package import failed", package=package_name, error=str(e))
                continue

            for module_info in pkgutil.walk_packages(getattr(package, "__path__", []), package_name + "."):
                importlib.import_module(module_info.name)

    def get_definitions(self) -> Dict[str, ComponentDefinition]:
        self._load_errors.clear()
        definitions: Dict[str, ComponentDefinition] = {}

        if self.use_registration_table:
            self._import_plugin_packages()
            definitions.update(registered_components())

        for definition in self.static_definitions:
            definitions[definition.id] = definition

        if self.manifest_path is not None:
            definitions.update(load_manifest(self.manifest_path))

        active = {}
        for component_id, definition in definitions.items():
            if not self.module_handler.module_exists(definition.provider):
                self.logger.debug(
                    "Skipping component from inactive provider",
                    component_id=component_id,
                    provider=definition.provider,
                )
                continue
            active[component_id] = definition

        if self.event_dispatcher is not None:
            event = self.event_dispatcher.dispatch(
                ComponentInfoAlterEvent(definitions=active), COMPONENT_INFO_ALTER
            )
            active = event.definitions

        self.logger.info("Component discovery completed", total_components=len(active))
        return active

    def get_load_errors(self) -> List[str]:
        """Get list of errors encountered during discovery."""
        return self._load_errors.copy()

"""
Library info alter subscribers
Flow: Host builds extension libraries → alter event → subscribers return new maps
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict

import structlog

from ambientimpact_core.core.events import LIBRARY_INFO_ALTER, EventDispatcher
from ambientimpact_core.core.modules import ModuleHandler
from ambientimpact_core.core.nested import merge_deep

logger = structlog.get_logger()

PROVIDER = "ambientimpact_core"
CORE_MODERNIZR_PATH = "assets/vendor/modernizr/modernizr.min.js"
MODERNIZR_VERSION = "v3.5.0"

Libraries = Dict[str, Dict[str, Any]]


@dataclass
class LibraryInfoAlterEvent:
    """Libraries of one extension, open to replacement by subscribers."""
    extension: str
    libraries: Libraries


class ComponentLibrariesSubscriber:
    """
    Registers the libraries declared by components with their own provider.

    Library file paths are relative to the provider root, so each provider's
    components are registered under that provider's extension only.
    """

    def __init__(
        self,
        module_handler: ModuleHandler,
        collect_libraries: Callable[[str], Libraries],
    ):
        self.module_handler = module_handler
        self.collect_libraries = collect_libraries

    def __call__(self, event: LibraryInfoAlterEvent) -> None:
        if not self.module_handler.module_exists(event.extension):
            return

        component_libraries = self.collect_libraries(event.extension)
        if not component_libraries:
            return

        event.libraries = {**event.libraries, **component_libraries}
        logger.debug(
            "Component libraries registered",
            extension=event.extension,
            count=len(component_libraries),
        )


class ModernizrSubscriber:
    """
    Replaces the core Modernizr build with the one this provider ships.

    Only applies while core still points at its default path, so another
    override is left alone, and only when the provider ships the build and
    is served from under the web root.
    """

    def __init__(self, module_handler: ModuleHandler):
        self.module_handler = module_handler

    def __call__(self, event: LibraryInfoAlterEvent) -> None:
        if event.extension != "core":
            return

        modernizr = event.libraries.get("modernizr") or {}
        js = modernizr.get("js") or {}
        if CORE_MODERNIZR_PATH not in js:
            return

        module = self.module_handler.get_module(PROVIDER)
        if module is None:
            return

        if module.web_path is None:
            logger.warning("Provider is outside the web root, Modernizr left to core", path=module.path)
            return

        if not (Path(module.path) / CORE_MODERNIZR_PATH).is_file():
            logger.warning("Modernizr build missing, Modernizr left to core", path=module.path)
            return

        # Core library paths resolve against the core directory.
        our_path = f"../{module.web_path}/{CORE_MODERNIZR_PATH}"
        new_js = {
            (our_path if key == CORE_MODERNIZR_PATH else key): value
            for key, value in js.items()
        }

        libraries = merge_deep(event.libraries)
        libraries["modernizr"]["js"] = new_js
        libraries["modernizr"]["version"] = MODERNIZR_VERSION
        event.libraries = libraries
        logger.info("Core Modernizr replaced", path=our_path)


def register_library_subscribers(
    event_dispatcher: EventDispatcher,
    module_handler: ModuleHandler,
    collect_libraries: Callable[[str], Libraries],
) -> None:
    event_dispatcher.add_listener(
        LIBRARY_INFO_ALTER, ComponentLibrariesSubscriber(module_handler, collect_libraries)
    )
    event_dispatcher.add_listener(LIBRARY_INFO_ALTER, ModernizrSubscriber(module_handler))


def alter_library_info(
    event_dispatcher: EventDispatcher,
    extension: str,
    libraries: Libraries,
) -> Libraries:
    """Run an extension's libraries through the alter subscribers."""
    event = event_dispatcher.dispatch(
        LibraryInfoAlterEvent(extension=extension, libraries=dict(libraries)),
        LIBRARY_INFO_ALTER,
    )
    return event.libraries

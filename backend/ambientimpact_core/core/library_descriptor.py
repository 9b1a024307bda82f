"""
Component library descriptors
Flow: YAML file → dependency injection → defer injection → path prefixing

A library descriptor mirrors the host's library format:

    photoswipe:
      css:
        component:
          photoswipe.css: {}
      js:
        photoswipe.js: {attributes: {defer: false}}
      dependencies:
        - core/drupal
      header: false

Every transform here returns new structures; the parsed input is never
modified in place.
"""

import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import structlog
import yaml

logger = structlog.get_logger()

LibraryDescriptor = Dict[str, Any]

_EXTERNAL = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)


def load_library_file(file_path: Path) -> Optional[Dict[str, LibraryDescriptor]]:
    """Parse a libraries file; None when the file does not exist."""
    if not file_path.is_file():
        return None

    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _is_external(key: str, file_settings: Any) -> bool:
    if isinstance(file_settings, Mapping) and file_settings.get("type") == "external":
        return True
    return bool(_EXTERNAL.match(key)) or key.startswith("/")


def _prefix_files(files: Mapping[str, Any], prefix: str) -> Dict[str, Any]:
    prefixed = {}
    for key, file_settings in files.items():
        new_key = key if _is_external(key, file_settings) else f"{prefix}/{key}"
        prefixed[new_key] = file_settings
    return prefixed


def _defer_js(files: Mapping[str, Any]) -> Dict[str, Any]:
    """Default every script to deferred unless it says otherwise."""
    deferred = {}
    for key, file_settings in files.items():
        file_settings = dict(file_settings or {})
        attributes = dict(file_settings.get("attributes") or {})
        attributes.setdefault("defer", True)
        file_settings["attributes"] = attributes
        deferred[key] = file_settings
    return deferred


def _with_framework_dependency(library: Mapping[str, Any], framework: str) -> Optional[list]:
    """
    Dependencies with the framework appended, or None to leave them as-is.

    Header-attached libraries never get the framework: attaching it would pull
    the framework into the header too, so such libraries must not rely on it.
    """
    if library.get("header", False):
        return None

    dependencies = library.get("dependencies")
    if dependencies is None:
        return [framework]
    if isinstance(dependencies, list) and framework not in dependencies:
        return dependencies + [framework]
    return None


def normalize_library(
    library: Mapping[str, Any],
    component_path: str,
    framework: str,
) -> LibraryDescriptor:
    """
    Normalize one library so it can be registered on behalf of the provider.

    File keys end up relative to the provider root rather than the
    component directory.
    """
    normalized: LibraryDescriptor = dict(library)

    if "css" in library:
        normalized["css"] = {
            group: _prefix_files(files or {}, component_path)
            for group, files in (library["css"] or {}).items()
        }

    if "js" in library:
        dependencies = _with_framework_dependency(library, framework)
        if dependencies is not None:
            normalized["dependencies"] = dependencies

        normalized["js"] = _prefix_files(_defer_js(library["js"] or {}), component_path)

    return normalized


def normalize_libraries(
    libraries: Mapping[str, Mapping[str, Any]],
    component_path: str,
    framework: str,
) -> Dict[str, LibraryDescriptor]:
    return {
        name: normalize_library(library or {}, component_path, framework)
        for name, library in libraries.items()
    }

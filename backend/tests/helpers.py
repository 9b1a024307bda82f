"""
Component classes and asset builders shared by the tests
"""

from pathlib import Path
from typing import Any, Dict, Optional, Type

import yaml

from ambientimpact_core.core.component_base import (
    ComponentBase,
    ComponentDefinition,
    HTMLCacheSettings,
)

TEST_PROVIDER = "test_provider"


class PlainComponent(ComponentBase):
    pass


class LayeredComponent(ComponentBase):
    def base_configuration_defaults(self) -> Dict[str, Any]:
        return {"a": 1, "b": 2}

    def default_configuration(self) -> Dict[str, Any]:
        return {"b": 3, "c": 4}


class SettingsComponent(ComponentBase):
    def default_configuration(self) -> Dict[str, Any]:
        return {"speed": 250}

    def get_js_settings(self) -> Dict[str, Any]:
        return {"speed": self.configuration["speed"]}


class TaggedHTMLComponent(ComponentBase):
    @classmethod
    def get_html_cache_settings(cls) -> HTMLCacheSettings:
        return HTMLCacheSettings(tags=["tagged_html"])


class DemoComponent(ComponentBase):
    def get_demo(self) -> Dict[str, Any]:
        return {"title": "Demo"}


def make_definition(
    component_id: str,
    component_class: Type[ComponentBase] = PlainComponent,
    provider: str = TEST_PROVIDER,
) -> ComponentDefinition:
    return ComponentDefinition(
        id=component_id,
        provider=provider,
        title=component_id.title(),
        description=f"{component_id} test component",
        component_class=component_class,
    )


def write_component_assets(
    provider_root: Path,
    component_id: str,
    libraries: Optional[Dict[str, Any]] = None,
    template: Optional[str] = None,
) -> Path:
    """Create components/<id>/ with optional libraries and template files."""
    directory = provider_root / "components" / component_id
    directory.mkdir(parents=True, exist_ok=True)

    if libraries is not None:
        (directory / f"{component_id}.libraries.yml").write_text(
            yaml.safe_dump(libraries), encoding="utf-8"
        )
    if template is not None:
        (directory / f"{component_id}.html.j2").write_text(template, encoding="utf-8")

    return directory

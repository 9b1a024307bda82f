"""
Shared fixtures: settings pointing at a temporary provider, and a service
factory wired with explicit component definitions.
"""

from pathlib import Path
from typing import Callable, Iterable

import pytest

from ambientimpact_core.config.settings import Settings
from ambientimpact_core.core.component_base import ComponentDefinition
from ambientimpact_core.core.component_discovery import ComponentDiscovery
from ambientimpact_core.core.events import EventDispatcher
from ambientimpact_core.core.modules import ModuleHandler
from ambientimpact_core.services.component_service import ComponentService

from tests.helpers import TEST_PROVIDER


@pytest.fixture
def provider_root(tmp_path: Path) -> Path:
    root = tmp_path / TEST_PROVIDER
    (root / "components").mkdir(parents=True)
    return root


@pytest.fixture
def settings(provider_root: Path) -> Settings:
    return Settings(
        _env_file=None,
        PROVIDER_ROOTS={TEST_PROVIDER: str(provider_root)},
        LOG_FORMAT="console",
        LANGUAGES=["en", "de", "fr"],
    )


@pytest.fixture
def make_service(settings: Settings) -> Callable[..., ComponentService]:
    def factory(
        definitions: Iterable[ComponentDefinition] = (),
        use_registration_table: bool = False,
        **kwargs,
    ) -> ComponentService:
        module_handler = ModuleHandler.from_settings(settings)
        dispatcher = EventDispatcher()
        discovery = ComponentDiscovery(
            module_handler,
            dispatcher,
            use_registration_table=use_registration_table,
            static_definitions=definitions,
        )
        return ComponentService(
            settings,
            module_handler=module_handler,
            event_dispatcher=dispatcher,
            discovery=discovery,
            **kwargs,
        )

    return factory

"""
Provider (module) handler
Maps provider names to their root directories and tracks which are active.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import structlog

from ambientimpact_core.config.settings import Settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class Module:
    """An installed provider."""
    name: str
    path: str
    # Path relative to the web root, or None when served from elsewhere
    web_path: Optional[str] = None


def _web_path(path: Path, web_root: Optional[Path]) -> Optional[str]:
    if not path.is_absolute():
        return path.as_posix()
    if web_root is None:
        return None
    try:
        return path.resolve().relative_to(web_root).as_posix()
    except ValueError:
        return None


class ModuleHandler:
    """Lookup of active providers by name."""

    def __init__(
        self,
        roots: Dict[str, str],
        enabled: Optional[Iterable[str]] = None,
        web_root: Optional[str] = None,
    ):
        self._modules: Dict[str, Module] = {}
        enabled = set(enabled) if enabled else set(roots)
        root = Path(web_root).resolve() if web_root else None

        for name, path in roots.items():
            if name not in enabled:
                continue
            module_path = Path(path)
            self._modules[name] = Module(
                name=name,
                path=str(module_path),
                web_path=_web_path(module_path, root),
            )

        logger.debug("Module handler initialized", modules=list(self._modules))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModuleHandler":
        return cls(settings.PROVIDER_PATHS, settings.ENABLED_PROVIDERS, settings.WEB_ROOT)

    def module_exists(self, name: str) -> bool:
        return name in self._modules

    def get_module(self, name: str) -> Optional[Module]:
        return self._modules.get(name)

    def get_module_list(self) -> List[str]:
        return list(self._modules)

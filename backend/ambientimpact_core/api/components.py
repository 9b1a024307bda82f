"""
Component API Endpoints
Thin routes over the registry aggregators.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ambientimpact_core.core.component_registry import ComponentRegistry, camelize_component_id
from ambientimpact_core.core.exceptions import ComponentNotFoundError
from ambientimpact_core.core.logging import get_logger
from ambientimpact_core.schemas.component import (
    CacheRebuildRequest,
    CacheRebuildResponse,
    ComponentDetail,
    ComponentSummary,
    FrontEndSettingsResponse,
)
from ambientimpact_core.services.component_service import (
    ComponentService,
    get_component_registry,
    get_component_service,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=List[ComponentSummary])
def list_components(
    registry: ComponentRegistry = Depends(get_component_registry),
):
    """List discovered components in discovery order."""
    return [
        ComponentSummary(**definition.summary())
        for definition in registry.get_definitions().values()
    ]


@router.get("/html", name="component_html_endpoint")
def component_html(
    registry: ComponentRegistry = Depends(get_component_registry),
) -> Dict[str, str]:
    """Rendered HTML of every component that has a template."""
    return registry.collect_html()


@router.get("/settings", response_model=FrontEndSettingsResponse)
def component_settings(
    registry: ComponentRegistry = Depends(get_component_registry),
    service: ComponentService = Depends(get_component_service),
):
    """Front-end settings keyed by camelized component id."""
    return FrontEndSettingsResponse(**service.get_front_end_settings(registry))


@router.get("/libraries")
def component_libraries(
    extension: str = Query("ambientimpact_core", description="Extension whose libraries to build"),
    service: ComponentService = Depends(get_component_service),
) -> Dict[str, Any]:
    """Libraries of an extension after the alter subscribers ran."""
    return service.get_library_info(extension)


@router.get("/paths")
def component_paths(
    provider: Optional[List[str]] = Query(None, description="Provider names or '*' patterns"),
    registry: ComponentRegistry = Depends(get_component_registry),
) -> List[str]:
    """Component directories of the matching providers."""
    return registry.resolve_component_paths(provider or [])


@router.post("/cache/rebuild", response_model=CacheRebuildResponse)
def rebuild_cache(
    request: Optional[CacheRebuildRequest] = None,
    service: ComponentService = Depends(get_component_service),
):
    """Invalidate cache tags, or drop all component caches."""
    if request is not None and request.tags:
        removed = service.invalidate_tags(request.tags)
        logger.info("Component cache tags invalidated", tags=request.tags, removed=removed)
        return CacheRebuildResponse(status="invalidated", removed=removed)

    service.rebuild_caches()
    return CacheRebuildResponse(status="rebuilt")


@router.get("/{component_id}", response_model=ComponentDetail)
def get_component(
    component_id: str,
    registry: ComponentRegistry = Depends(get_component_registry),
):
    """One component with its resolved configuration."""
    instance = registry.get_instance(component_id)
    if instance is None:
        raise ComponentNotFoundError(component_id)

    return ComponentDetail(
        **instance.definition.summary(),
        camelized_id=camelize_component_id(component_id),
        path=instance.get_path(),
        configuration=instance.get_configuration(),
        has_html=instance.has_html(),
        has_demo=instance.has_demo(),
    )

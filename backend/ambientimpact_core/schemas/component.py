"""
Component Schemas
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ComponentSummary(BaseModel):
    """One discovered component."""
    id: str = Field(..., description="Component identifier")
    provider: str = Field(..., description="Provider that declares the component")
    title: str = Field("", description="Human-readable title")
    description: str = Field("", description="Component description")


class ComponentDetail(ComponentSummary):
    """A component with its resolved configuration and capabilities."""
    camelized_id: str = Field(..., description="Identifier used by the front-end")
    path: str = Field(..., description="Component directory relative to the provider")
    configuration: Dict[str, Any] = Field(default_factory=dict)
    has_html: bool = Field(False)
    has_demo: bool = Field(False)


class FrontEndSettingsResponse(BaseModel):
    """Settings delivered to the client runtime."""
    components: Dict[str, Any] = Field(default_factory=dict)
    componentsWithHTML: List[str] = Field(default_factory=list)
    htmlEndpoint: str = Field(...)


class CacheRebuildRequest(BaseModel):
    """Invalidate by tags, or rebuild everything when no tags are given."""
    tags: Optional[List[str]] = Field(None, description="Cache tags to invalidate")


class CacheRebuildResponse(BaseModel):
    status: str = Field(...)
    removed: Optional[int] = Field(None, description="Items removed by tag invalidation")

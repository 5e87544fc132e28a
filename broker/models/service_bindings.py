from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class BindingRequest(BaseModel):
    service_id: Optional[str] = Field(None, description="Catalog id of the bound instance's service")
    plan_id: Optional[str] = Field(None, description="Catalog id of the bound instance's plan")
    app_guid: Optional[str] = None
    bind_resource: Optional[dict[str, Any]] = None
    parameters: Optional[dict[str, Any]] = None


class CreateServiceBindingResponse(BaseModel):
    credentials: dict[str, Any] = Field(default_factory=dict)

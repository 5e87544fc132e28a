from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class CreateServiceInstanceRequest(BaseModel):
    service_id: Optional[str] = Field(None, description="Catalog id of the service to provision")
    plan_id: Optional[str] = Field(None, description="Catalog id of the plan to provision")
    organization_guid: Optional[str] = None
    space_guid: Optional[str] = None
    accepts_incomplete: Optional[bool] = None
    parameters: Optional[dict[str, Any]] = None


class CreateServiceInstanceResponse(BaseModel):
    dashboard_url: Optional[str] = None
    operation: Optional[str] = None


class DeleteServiceInstanceResponse(BaseModel):
    operation: Optional[str] = None

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class ServicePlan(BaseModel):
    id: str
    name: str
    description: str = ""
    free: Optional[bool] = None
    metadata: Optional[dict[str, Any]] = None


class Service(BaseModel):
    name: str
    id: str = ""
    description: str = ""
    tags: Optional[list[str]] = None
    requires: Optional[list[str]] = None
    bindable: bool = False
    plan_updateable: Optional[bool] = None
    metadata: Optional[dict[str, Any]] = None
    plans: list[ServicePlan] = Field(default_factory=list)

    def find_plan(self, plan_id: str) -> Optional[ServicePlan]:
        return next((plan for plan in self.plans if plan.id == plan_id), None)


class Catalog(BaseModel):
    services: list[Service] = Field(default_factory=list)

    def find_service(self, service_id: str) -> Optional[Service]:
        return next((service for service in self.services if service.id == service_id), None)

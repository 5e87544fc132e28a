from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from broker.models.catalog import Catalog, Service, ServicePlan
from broker.models.service_bindings import BindingRequest, CreateServiceBindingResponse
from broker.models.service_instances import (
    CreateServiceInstanceRequest,
    CreateServiceInstanceResponse,
    DeleteServiceInstanceResponse,
)
from broker.services.provisioner import ConflictError, NotFoundError, Provisioner, ValidationError

logger = logging.getLogger(__name__)


SERVICE_ID = "4f6e6cf6-ffdd-425f-a2c7-3c9258ad2468"
PLAN_ID = "86064792-7ea2-467b-af93-ac9694d96d52"

DEFAULT_CREDENTIALS: Mapping[str, Any] = {
    "special-key-1": "special-value-1",
    "special-key-2": "special-value-2",
}


@dataclass
class _UserProvidedInstance:
    instance_id: str
    service_id: str
    plan_id: str
    credentials: dict[str, Any]
    bindings: set[str] = field(default_factory=set)

    def describe(self) -> dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "service_id": self.service_id,
            "plan_id": self.plan_id,
        }


class UserProvidedProvisioner(Provisioner):
    """In-memory provisioner for a "user provided" service.

    The caller supplies the credentials of an external resource when the
    instance is created (`parameters["credentials"]`), and every binding hands
    them back. State lives only in this process and is guarded by one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._instances: dict[str, _UserProvidedInstance] = {}
        self._catalog = Catalog(
            services=[
                Service(
                    name="user-provided-service",
                    id=SERVICE_ID,
                    description="A user provided service",
                    bindable=True,
                    plans=[
                        ServicePlan(
                            id=PLAN_ID,
                            name="default",
                            description="Credentials supplied by the user at provision time",
                            free=True,
                        )
                    ],
                )
            ]
        )

    def list_catalog(self) -> Catalog:
        return self._catalog.model_copy(deep=True)

    def fetch_instance(self, instance_id: str) -> dict[str, Any]:
        with self._lock:
            return self._get_instance(instance_id).describe()

    def create_instance(
        self, instance_id: str, request: CreateServiceInstanceRequest
    ) -> CreateServiceInstanceResponse:
        self._validate_plan(service_id=request.service_id, plan_id=request.plan_id)
        credentials = self._credentials_from(request.parameters or {})

        with self._lock:
            if instance_id in self._instances:
                raise ConflictError(f"Instance {instance_id!r} already exists")
            self._instances[instance_id] = _UserProvidedInstance(
                instance_id=instance_id,
                service_id=request.service_id,
                plan_id=request.plan_id,
                credentials=credentials,
            )

        logger.debug("Stored user provided instance %s", instance_id)
        return CreateServiceInstanceResponse()

    def remove_instance(self, instance_id: str) -> DeleteServiceInstanceResponse:
        with self._lock:
            instance = self._get_instance(instance_id)
            del self._instances[instance_id]

        if instance.bindings:
            logger.info(
                "Removed instance %s together with %d binding(s)", instance_id, len(instance.bindings)
            )
        return DeleteServiceInstanceResponse()

    def create_binding(
        self, instance_id: str, binding_id: str, request: BindingRequest
    ) -> CreateServiceBindingResponse:
        with self._lock:
            instance = self._get_instance(instance_id)
            if binding_id in instance.bindings:
                raise ConflictError(f"Binding {binding_id!r} already exists for instance {instance_id!r}")
            instance.bindings.add(binding_id)
            credentials = dict(instance.credentials)

        return CreateServiceBindingResponse(credentials=credentials)

    def remove_binding(self, instance_id: str, binding_id: str) -> None:
        with self._lock:
            instance = self._get_instance(instance_id)
            if binding_id not in instance.bindings:
                raise NotFoundError(f"Binding {binding_id!r} not found for instance {instance_id!r}")
            instance.bindings.discard(binding_id)

    def _get_instance(self, instance_id: str) -> _UserProvidedInstance:
        # Callers hold self._lock.
        instance = self._instances.get(instance_id)
        if instance is None:
            raise NotFoundError(f"Instance {instance_id!r} not found")
        return instance

    def _validate_plan(self, *, service_id: Optional[str], plan_id: Optional[str]) -> None:
        if not service_id or not plan_id:
            raise ValidationError("service_id and plan_id are required")
        service = self._catalog.find_service(service_id)
        if service is None:
            raise ValidationError(f"Unknown service_id {service_id!r}")
        if service.find_plan(plan_id) is None:
            raise ValidationError(f"Unknown plan_id {plan_id!r} for service {service.name!r}")

    @staticmethod
    def _credentials_from(parameters: Mapping[str, Any]) -> dict[str, Any]:
        if "credentials" not in parameters:
            return dict(DEFAULT_CREDENTIALS)

        credentials = parameters["credentials"]
        if not isinstance(credentials, Mapping):
            raise ValidationError("'credentials' parameter must be a JSON object")
        return dict(credentials)

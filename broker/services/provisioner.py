"""Provisioner contract.

Every backing implementation (one adapter per backing service) implements
`Provisioner`. The HTTP routes only ever hold a reference to this abstraction.

Concurrency: routes call these methods from worker threads, one per request.
Implementations must be safe under concurrent calls with distinct arguments,
and concurrent calls with identical arguments must not corrupt shared state.
All locking belongs to the implementation; callers pass no shared mutable
state beyond the per-call arguments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from http import HTTPStatus
from typing import Any, ClassVar

from broker.models.catalog import Catalog
from broker.models.service_bindings import BindingRequest, CreateServiceBindingResponse
from broker.models.service_instances import (
    CreateServiceInstanceRequest,
    CreateServiceInstanceResponse,
    DeleteServiceInstanceResponse,
)


class ProvisionerError(RuntimeError):
    """Opaque backend failure. Base class of every provisioner error."""

    error_kind: ClassVar[str] = "ProvisionerError"
    status_code: ClassVar[int] = HTTPStatus.BAD_GATEWAY


class NotFoundError(ProvisionerError):
    error_kind: ClassVar[str] = "NotFound"
    status_code: ClassVar[int] = HTTPStatus.NOT_FOUND


class ConflictError(ProvisionerError):
    error_kind: ClassVar[str] = "Conflict"
    status_code: ClassVar[int] = HTTPStatus.CONFLICT


class ValidationError(ProvisionerError):
    """Request is structurally valid but rejected (unknown plan, bad parameters)."""

    error_kind: ClassVar[str] = "ValidationError"
    status_code: ClassVar[int] = HTTPStatus.UNPROCESSABLE_ENTITY


class Provisioner(ABC):
    """Every backing service implementation must implement this interface."""

    # -- Catalog --

    @abstractmethod
    def list_catalog(self) -> Catalog:
        """Return the services and plans this provisioner offers."""

    # -- Service instances --

    @abstractmethod
    def fetch_instance(self, instance_id: str) -> Any:
        """Return an opaque, JSON-encodable descriptor of an existing instance.

        Raises:
            NotFoundError: If no instance with `instance_id` exists.
        """

    @abstractmethod
    def create_instance(
        self, instance_id: str, request: CreateServiceInstanceRequest
    ) -> CreateServiceInstanceResponse:
        """Provision a new instance under a caller-supplied id.

        `request.parameters` is never None.

        Raises:
            ConflictError: If the id is already provisioned (unless treated as idempotent success).
            ValidationError: If the service or plan id is not offered.
        """

    @abstractmethod
    def remove_instance(self, instance_id: str) -> DeleteServiceInstanceResponse:
        """Deprovision an instance.

        Raises:
            NotFoundError: If the instance does not exist. Never a silent success.
        """

    # -- Service bindings --

    @abstractmethod
    def create_binding(
        self, instance_id: str, binding_id: str, request: BindingRequest
    ) -> CreateServiceBindingResponse:
        """Create credentials for an instance.

        `request.parameters["instanceId"]` always holds `instance_id`.

        Raises:
            NotFoundError: If the instance does not exist.
            ConflictError: If the binding already exists.
        """

    @abstractmethod
    def remove_binding(self, instance_id: str, binding_id: str) -> None:
        """Revoke a binding.

        Raises:
            NotFoundError: If the instance or binding does not exist.
        """

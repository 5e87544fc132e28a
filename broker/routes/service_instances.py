from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse
from starlette import status

from broker.models.errors import ErrorResponse
from broker.models.service_instances import (
    CreateServiceInstanceRequest,
    CreateServiceInstanceResponse,
    DeleteServiceInstanceResponse,
)
from broker.services.dependencies import get_provisioner
from broker.services.dispatch import call_provisioner, encoded_response
from broker.services.provisioner import Provisioner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v2/service_instances", tags=["service_instances"])

_ERROR_RESPONSES = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


@router.get("/{instance_id}", responses=_ERROR_RESPONSES)
async def get_service_instance(
    instance_id: str = Path(..., description="Caller supplied service instance id"),
    provisioner: Provisioner = Depends(get_provisioner),
) -> JSONResponse:
    logger.info("Getting service instance %s", instance_id)

    descriptor = await call_provisioner(provisioner.fetch_instance, instance_id)
    return encoded_response(status.HTTP_200_OK, descriptor)


@router.put(
    "/{instance_id}",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateServiceInstanceResponse,
    responses=_ERROR_RESPONSES,
)
async def create_service_instance(
    payload: CreateServiceInstanceRequest,
    instance_id: str = Path(..., description="Caller supplied service instance id"),
    provisioner: Provisioner = Depends(get_provisioner),
) -> JSONResponse:
    logger.info("Creating service instance %s", instance_id)

    # The provisioner never sees a missing parameter bag.
    if payload.parameters is None:
        payload = payload.model_copy(update={"parameters": {}})

    result = await call_provisioner(provisioner.create_instance, instance_id, payload)
    return encoded_response(status.HTTP_201_CREATED, result)


@router.delete(
    "/{instance_id}",
    response_model=DeleteServiceInstanceResponse,
    responses=_ERROR_RESPONSES,
)
async def remove_service_instance(
    instance_id: str = Path(..., description="Caller supplied service instance id"),
    provisioner: Provisioner = Depends(get_provisioner),
) -> JSONResponse:
    logger.info("Removing service instance %s", instance_id)

    result = await call_provisioner(provisioner.remove_instance, instance_id)
    return encoded_response(status.HTTP_200_OK, result)

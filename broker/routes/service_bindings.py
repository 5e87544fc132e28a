from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse
from starlette import status

from broker.models.errors import ErrorResponse
from broker.models.service_bindings import BindingRequest, CreateServiceBindingResponse
from broker.services.dependencies import get_provisioner
from broker.services.dispatch import call_provisioner, encoded_response
from broker.services.provisioner import Provisioner

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/v2/service_instances/{instance_id}/service_bindings",
    tags=["service_bindings"],
)

_ERROR_RESPONSES = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


@router.put(
    "/{binding_id}",
    response_model=CreateServiceBindingResponse,
    responses=_ERROR_RESPONSES,
)
async def bind(
    payload: BindingRequest,
    instance_id: str = Path(..., description="Service instance the binding belongs to"),
    binding_id: str = Path(..., description="Caller supplied binding id"),
    provisioner: Provisioner = Depends(get_provisioner),
) -> JSONResponse:
    logger.info("Bind binding_id=%s, instance_id=%s", binding_id, instance_id)

    # instanceId always reflects the path, overriding anything the caller sent.
    parameters = dict(payload.parameters or {})
    parameters["instanceId"] = instance_id
    payload = payload.model_copy(update={"parameters": parameters})

    result = await call_provisioner(provisioner.create_binding, instance_id, binding_id, payload)
    return encoded_response(status.HTTP_200_OK, result)


@router.delete("/{binding_id}", responses=_ERROR_RESPONSES)
async def unbind(
    instance_id: str = Path(..., description="Service instance the binding belongs to"),
    binding_id: str = Path(..., description="Caller supplied binding id"),
    provisioner: Provisioner = Depends(get_provisioner),
) -> JSONResponse:
    logger.info("Unbind binding_id=%s, instance_id=%s", binding_id, instance_id)

    await call_provisioner(provisioner.remove_binding, instance_id, binding_id)
    return JSONResponse(status_code=status.HTTP_200_OK, content={})

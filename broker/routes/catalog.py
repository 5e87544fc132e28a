from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette import status

from broker.models.catalog import Catalog
from broker.models.errors import ErrorResponse
from broker.services.dependencies import get_provisioner
from broker.services.dispatch import call_provisioner, encoded_response
from broker.services.provisioner import Provisioner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v2", tags=["catalog"])


@router.get(
    "/catalog",
    response_model=Catalog,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def get_catalog(
    provisioner: Provisioner = Depends(get_provisioner),
) -> JSONResponse:
    logger.info("Getting service broker catalog")

    catalog = await call_provisioner(provisioner.list_catalog)
    return encoded_response(status.HTTP_200_OK, catalog)

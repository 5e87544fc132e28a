from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from broker.services.provisioner import ProvisionerError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_provisioner(func: Callable[..., T], *args: Any) -> T:
    """Run one provisioner call on a worker thread.

    Provisioner calls may block, so each runs off the event loop. Anything
    that is not already a `ProvisionerError` is logged and wrapped so the
    routes only ever see the provisioner error taxonomy.
    """

    try:
        return await run_in_threadpool(func, *args)
    except ProvisionerError:
        raise
    except Exception as exc:
        logger.exception("Provisioner call %s failed unexpectedly", getattr(func, "__name__", func))
        raise ProvisionerError(str(exc) or type(exc).__name__) from exc


def encoded_response(status_code: int, result: Any) -> JSONResponse:
    """Encode an opaque provisioner result into a JSON response.

    A result that cannot be encoded (unsupported types, NaN/inf floats) is a
    provisioner failure and surfaces through the error envelope.
    """

    try:
        if isinstance(result, BaseModel):
            content = result.model_dump(mode="json", exclude_none=True)
        else:
            content = jsonable_encoder(result)
        return JSONResponse(status_code=status_code, content=content)
    except (TypeError, ValueError) as exc:
        logger.error("Provisioner result of type %s could not be encoded: %s", type(result).__name__, exc)
        raise ProvisionerError(f"Provisioner result could not be encoded: {exc}") from exc

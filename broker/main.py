from contextlib import asynccontextmanager
from http import HTTPStatus
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from broker.models.errors import ErrorResponse
from broker.routes.catalog import router as catalog_router
from broker.routes.service_bindings import router as service_bindings_router
from broker.routes.service_instances import router as service_instances_router
from broker.services.config import BrokerConfig
from broker.services.dependencies import get_broker_config_from_app
from broker.services.provisioner import Provisioner, ProvisionerError

logger = logging.getLogger(__name__)

BODY_DECODE_ERROR = "BodyDecodeError"


def _ensure_logging(level: int = logging.INFO) -> None:
    formatter = logging.Formatter("%(levelname)s: %(message)s")
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    else:
        root.setLevel(level)
        for handler in root.handlers:
            handler.setFormatter(formatter)


def _error_response(
    status_code: int, *, error: str, description: str, headers: Optional[dict[str, str]] = None
) -> JSONResponse:
    body = ErrorResponse(error=error, description=description)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg', 'invalid value')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Malformed request body"


async def provisioner_error_handler(request: Request, exc: ProvisionerError) -> JSONResponse:
    """Map provisioner failures to the uniform error envelope.

    By default every kind (NotFound, Conflict, ValidationError, backend
    failure) shares one generic client error status, so callers tell them
    apart by the `error` field of the body. With `granular_errors` enabled
    each kind uses its own status instead.

    Returns:
        400 (or the kind's status) with a JSON body: {"error": "...", "description": "..."}
    """

    config = get_broker_config_from_app(request.app)
    status_code = exc.status_code if config.granular_errors else status.HTTP_400_BAD_REQUEST

    logger.warning("%s %s failed: %s: %s", request.method, request.url.path, exc.error_kind, exc)
    return _error_response(status_code, error=exc.error_kind, description=str(exc))


async def body_decode_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject undecodable request bodies before the provisioner is invoked."""

    description = _describe_validation_errors(exc)
    logger.warning("%s %s rejected: %s: %s", request.method, request.url.path, BODY_DECODE_ERROR, description)
    return _error_response(status.HTTP_400_BAD_REQUEST, error=BODY_DECODE_ERROR, description=description)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap routing errors (unknown path, wrong method) in the error envelope."""

    try:
        error = HTTPStatus(exc.status_code).phrase.replace(" ", "")
    except ValueError:
        error = "HTTPError"
    return _error_response(exc.status_code, error=error, description=str(exc.detail), headers=exc.headers)


def create_app(provisioner: Provisioner, config: Optional[BrokerConfig] = None) -> FastAPI:
    """Build a broker app serving `provisioner`.

    Each call returns a new, independent app; nothing is registered globally.
    """

    config = config or BrokerConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _ensure_logging(config.log_level_number)
        yield

    app = FastAPI(title="Service Broker", lifespan=lifespan)
    app.state.provisioner = provisioner
    app.state.config = config

    app.include_router(catalog_router)
    app.include_router(service_instances_router)
    app.include_router(service_bindings_router)

    app.add_exception_handler(ProvisionerError, provisioner_error_handler)
    app.add_exception_handler(RequestValidationError, body_decode_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    return app


def start(config: BrokerConfig, provisioner: Provisioner) -> None:
    """Serve a new broker app for `provisioner` until the process is stopped.

    Failing to bind the listening port terminates the process.
    """

    _ensure_logging(config.log_level_number)
    logger.info("Starting server on %s:%d", config.host, config.port)

    app = create_app(provisioner, config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())

from __future__ import annotations

from fastapi import FastAPI, Request

from broker.services.config import BrokerConfig
from broker.services.provisioner import Provisioner


def get_provisioner_from_app(app: FastAPI) -> Provisioner:
    provisioner = getattr(app.state, "provisioner", None)
    if provisioner is None:
        raise RuntimeError("Provisioner not initialized (app.state.provisioner)")
    if not isinstance(provisioner, Provisioner):
        raise RuntimeError("Unexpected provisioner type")
    return provisioner


def get_provisioner(request: Request) -> Provisioner:
    """FastAPI dependency provider for the app's backing provisioner."""

    return get_provisioner_from_app(request.app)


def get_broker_config_from_app(app: FastAPI) -> BrokerConfig:
    config = getattr(app.state, "config", None)
    if not isinstance(config, BrokerConfig):
        raise RuntimeError("Broker config not initialized (app.state.config)")
    return config


def get_broker_config(request: Request) -> BrokerConfig:
    return get_broker_config_from_app(request.app)

"""Pytest fixtures for the broker HTTP routes (the recording fake provisioner lives in tests/fakes.py)."""

from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from broker.main import create_app
from broker.services.config import BrokerConfig
from broker.services.provisioner import Provisioner
from broker.services.user_provided_provisioner import UserProvidedProvisioner


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    def _make(provisioner: Provisioner, config: Optional[BrokerConfig] = None) -> TestClient:
        return TestClient(create_app(provisioner, config))

    return _make


@pytest.fixture
def user_provided() -> UserProvidedProvisioner:
    return UserProvidedProvisioner()


@pytest.fixture
def user_provided_client(make_client, user_provided) -> TestClient:
    return make_client(user_provided)

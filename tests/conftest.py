"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from launchpad.admin import AdminController
from launchpad.api.endpoints import get_faucet_enabled, get_launchpad
from launchpad.api.main import app
from launchpad.host import ExecutionEnvironment
from launchpad.registry import Registry
from launchpad.system import Launchpad
from tests.helpers import ALICE, BOB, ETHER, make_launchpad


@pytest.fixture
def launchpad() -> Launchpad:
    """A fresh launchpad with default parameters; ALICE and BOB hold 100 ether."""
    return make_launchpad(funded=[ALICE, BOB])


@pytest.fixture
def env(launchpad: Launchpad) -> ExecutionEnvironment:
    return launchpad.env


@pytest.fixture
def registry(launchpad: Launchpad) -> Registry:
    return launchpad.registry


@pytest.fixture
def admin(launchpad: Launchpad) -> AdminController:
    return launchpad.admin


@pytest.fixture
def asset_id(registry: Registry) -> str:
    """An asset launched by ALICE with no initial buy."""
    return registry.launch("Alpha", "ALP", ALICE)


@pytest.fixture
def bought_asset_id(registry: Registry) -> str:
    """An asset launched by ALICE with a 1 ether initial buy."""
    return registry.launch("Beta", "BTA", ALICE, ETHER)


@pytest.fixture
def client(launchpad: Launchpad) -> Iterator[TestClient]:
    """A test client bound to the launchpad fixture, with the faucet on."""
    app.dependency_overrides[get_launchpad] = lambda: launchpad
    app.dependency_overrides[get_faucet_enabled] = lambda: True
    yield TestClient(app)
    app.dependency_overrides.clear()

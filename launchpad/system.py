"""Wiring of the launchpad components into one runnable system."""

from __future__ import annotations

import os
from dataclasses import dataclass

import structlog

from launchpad.admin import AdminController
from launchpad.config import DEFAULT_CONFIG, LaunchpadConfig
from launchpad.constants import DEFAULT_REGISTRY_ADDRESS
from launchpad.events import CompositeEventSink, InMemoryEventLog, StructlogEventSink
from launchpad.host import ExecutionEnvironment
from launchpad.migration import LiquidityMigrator
from launchpad.registry import Registry

logger = structlog.get_logger()

# Owner used when LAUNCHPAD_OWNER is not set
DEFAULT_OWNER = "0x00000000000000000000000000000000000a11ce"


@dataclass
class Launchpad:
    """Environment, registry and admin controller sharing one state."""

    env: ExecutionEnvironment
    registry: Registry
    admin: AdminController
    events: InMemoryEventLog


def build_launchpad(
    owner: str,
    config: LaunchpadConfig = DEFAULT_CONFIG,
    address: str = DEFAULT_REGISTRY_ADDRESS,
    migrator: LiquidityMigrator | None = None,
    log_events: bool = True,
) -> Launchpad:
    """Create a fresh launchpad with an in-memory notification log.

    Args:
        owner: Admin identity
        config: Initial global parameters
        address: Registry account
        migrator: Optional external liquidity venue
        log_events: Also publish every notification through structlog
    """
    events = InMemoryEventLog()
    sink = CompositeEventSink([events, StructlogEventSink()]) if log_events else events
    env = ExecutionEnvironment(sink=sink)
    registry = Registry(env, owner=owner, config=config, address=address, migrator=migrator)
    return Launchpad(env=env, registry=registry, admin=AdminController(registry), events=events)


def _create_default_launchpad() -> Launchpad:
    """Create the process-wide launchpad from LAUNCHPAD_* environment variables."""
    owner = os.environ.get("LAUNCHPAD_OWNER", DEFAULT_OWNER)
    config = LaunchpadConfig.from_env()
    logger.info(
        "launchpad_created",
        owner=owner,
        fee_numerator=config.fee_numerator,
        fee_denominator=config.fee_denominator,
    )
    # Events are already logged by the registry/admin log lines
    return build_launchpad(owner=owner, config=config, log_events=False)


_default_launchpad: Launchpad | None = None


def get_default_launchpad() -> Launchpad:
    """Return the process-wide launchpad, creating it on first use."""
    global _default_launchpad
    if _default_launchpad is None:
        _default_launchpad = _create_default_launchpad()
    return _default_launchpad

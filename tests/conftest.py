"""Shared fixtures: a controller bound to a simulated rig."""

import pytest

from minerig import MiningRigController, RigConfig, SimulatedGrid


@pytest.fixture
def config():
    return RigConfig()


@pytest.fixture
def grid(config):
    return SimulatedGrid.for_config(config)


@pytest.fixture
def messages():
    return []


@pytest.fixture
def rig(grid, config, messages):
    return MiningRigController(grid, config=config, echo=messages.append)


@pytest.fixture
def block(grid, config):
    """Look up a simulated block by role."""

    def lookup(role):
        return grid.get_block_with_name(config.block_name(role))

    return lookup

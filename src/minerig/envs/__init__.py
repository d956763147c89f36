from .mining_rig import MiningRigEnv
from .sim_blocks import (
    SimulatedDrill,
    SimulatedGrid,
    SimulatedPiston,
    SimulatedRotor,
    SimulatedTimer,
)

__all__ = [
    "MiningRigEnv",
    "SimulatedDrill",
    "SimulatedGrid",
    "SimulatedPiston",
    "SimulatedRotor",
    "SimulatedTimer",
]

# src/minerig/__init__.py
from importlib.metadata import version, PackageNotFoundError

from .core import (
    ActuatorCommand,
    BindingError,
    DepthPhase,
    OperationCommand,
    QuadPhase,
    QuadrantProgress,
    RigConfig,
    RigState,
    bind_rig,
)

from .controller import MiningRigController, Transition

from .envs.mining_rig import MiningRigEnv
from .envs.sim_blocks import SimulatedGrid

from .modules.depth import DepthAdjustmentModule, DepthModuleParameters
from .modules.quadrant import QuadrantMiningModule, QuadrantModuleParameters

__all__ = [
    # Core classes
    "ActuatorCommand",
    "BindingError",
    "DepthPhase",
    "OperationCommand",
    "QuadPhase",
    "QuadrantProgress",
    "RigConfig",
    "RigState",
    "bind_rig",
    # Controller
    "MiningRigController",
    "Transition",
    # Simulated rig
    "MiningRigEnv",
    "SimulatedGrid",
    # State machines and their parameters
    "DepthAdjustmentModule",
    "DepthModuleParameters",
    "QuadrantMiningModule",
    "QuadrantModuleParameters",
]

try:
    __version__ = version("minerig")
except PackageNotFoundError:
    __version__ = "0.dev"

# src/minerig/core/__init__.py

from .state import (
    DepthPhase,
    OperationCommand,
    PendingTrigger,
    QuadPhase,
    QuadrantProgress,
    RigState,
)
from .rig_config import RigConfig, TRIGGER_ROLES, TRIGGER_TOKENS
from .hardware import ActuatorCommand, BindingError, RigHandles, bind_rig
from .module import RigModule

__all__ = [
    "DepthPhase",
    "OperationCommand",
    "PendingTrigger",
    "QuadPhase",
    "QuadrantProgress",
    "RigState",
    "RigConfig",
    "TRIGGER_ROLES",
    "TRIGGER_TOKENS",
    "ActuatorCommand",
    "BindingError",
    "RigHandles",
    "bind_rig",
    "RigModule",
]

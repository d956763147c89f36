# src/minerig/core/module.py
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..controller import MiningRigController
    from .hardware import RigHandles
    from .rig_config import RigConfig
    from .state import RigState


class RigModule:
    """Base class for the controller's state machines."""

    def __init__(self, rig: MiningRigController):
        self.rig = rig

    @property
    def state(self) -> RigState:
        return self.rig.state

    @property
    def handles(self) -> RigHandles:
        return self.rig.handles

    @property
    def config(self) -> RigConfig:
        return self.rig.config

    def echo(self, message: str) -> None:
        self.rig.echo(message)

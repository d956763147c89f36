# src/minerig/envs/sim_blocks.py
"""
Kinematic stand-ins for the rig's blocks.

Pistons and the rotor move at their commanded velocity and stop at their
bounds; there is no inertia, load or collision. Timers count down and hand
back their resume token once, the way a timer block runs its action.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np

from ..core.rig_config import RigConfig, TRIGGER_ROLES, TRIGGER_TOKENS


def _advance(position: float, velocity: float, lower: float, upper: float, dt: float) -> float:
    """Move toward the bound in the direction of travel without crossing it."""
    if velocity > 0:
        return max(position, min(position + velocity * dt, upper))
    if velocity < 0:
        return min(position, max(position + velocity * dt, lower))
    return position


class SimulatedPiston:
    def __init__(self, span: float = 10.0, speed: float = 0.5, position: float = 0.0):
        self.span = span
        self.speed = speed
        self.position = float(position)
        self.velocity = 0.0
        self.lower = 0.0
        self.upper = span

    def current_position(self) -> float:
        return self.position

    def set_velocity(self, velocity: float) -> None:
        self.velocity = float(velocity)

    def set_upper_bound(self, position: float) -> None:
        self.upper = float(np.clip(position, 0.0, self.span))

    def set_lower_bound(self, position: float) -> None:
        self.lower = float(np.clip(position, 0.0, self.span))

    def retract(self) -> None:
        self.velocity = -abs(self.velocity or self.speed)

    def extend(self) -> None:
        self.velocity = abs(self.velocity or self.speed)

    def update(self, dt: float) -> None:
        self.position = _advance(self.position, self.velocity, self.lower, self.upper, dt)

    def __repr__(self) -> str:
        return f"SimulatedPiston(position={self.position:g}, velocity={self.velocity:g})"


class SimulatedRotor:
    """Rotor with angle limits in degrees and a target velocity in rad/s."""

    def __init__(self, angle: float = 0.0):
        self._angle = float(angle)
        self.velocity = 0.0  # [rad/s]
        self.lower = -np.inf  # [deg]
        self.upper = np.inf  # [deg]

    def angle(self) -> float:
        return self._angle

    def set_upper_bound_degrees(self, angle: float) -> None:
        self.upper = float(angle)

    def set_lower_bound_degrees(self, angle: float) -> None:
        self.lower = float(angle)

    def set_target_velocity(self, velocity: float) -> None:
        self.velocity = float(velocity)

    def update(self, dt: float) -> None:
        self._angle = _advance(
            self._angle, float(np.degrees(self.velocity)), self.lower, self.upper, dt
        )


class SimulatedDrill:
    def __init__(self):
        self.enabled = False

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)


class SimulatedTimer:
    """Timer block that delivers ``token`` once ``delay`` seconds after starting."""

    def __init__(self, token: str, delay: float):
        self.token = token
        self.delay = delay
        self.remaining: Optional[float] = None
        self.starts = 0

    @property
    def running(self) -> bool:
        return self.remaining is not None

    def start_countdown(self) -> None:
        self.remaining = self.delay
        self.starts += 1

    def stop_countdown(self) -> None:
        self.remaining = None

    def update(self, dt: float) -> Optional[str]:
        if self.remaining is None:
            return None
        self.remaining -= dt
        # Tolerate accumulated float error on the last tick
        if self.remaining <= 1e-9:
            self.remaining = None
            return self.token
        return None


class SimulatedGrid:
    """Name lookup over simulated blocks, advanced together by :meth:`tick`."""

    def __init__(self, blocks: Dict[str, Any] | None = None):
        self.blocks: Dict[str, Any] = dict(blocks or {})

    def get_block_with_name(self, name: str) -> Optional[Any]:
        return self.blocks.get(name)

    def add(self, name: str, block: Any) -> Any:
        self.blocks[name] = block
        return block

    def remove(self, name: str) -> None:
        self.blocks.pop(name, None)

    @classmethod
    def for_config(cls, config: RigConfig, piston_speed: float = 0.5) -> "SimulatedGrid":
        """Build a full rig named after ``config.block_names``."""
        grid = cls()
        span = config.piston_span
        grid.add(config.block_name("rotor"), SimulatedRotor())
        grid.add(config.block_name("side_piston"), SimulatedPiston(span, piston_speed))
        grid.add(config.block_name("forward_piston"), SimulatedPiston(span, piston_speed))
        for role in config.depth_piston_roles():
            grid.add(config.block_name(role), SimulatedPiston(span, piston_speed))
        grid.add(config.block_name("drill"), SimulatedDrill())
        for role in TRIGGER_ROLES:
            grid.add(
                config.block_name(role),
                SimulatedTimer(TRIGGER_TOKENS[role], config.trigger_delays[role]),
            )
        return grid

    def tick(self, dt: float) -> List[str]:
        """Advance every block by ``dt`` and return the tokens of expired timers."""
        fired: List[str] = []
        for block in self.blocks.values():
            if isinstance(block, SimulatedTimer):
                token = block.update(dt)
                if token is not None:
                    fired.append(token)
            elif hasattr(block, "update"):
                block.update(dt)
        return fired

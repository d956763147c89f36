# src/minerig/envs/mining_rig.py
from __future__ import annotations

from typing import Callable, List

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from ..controller import MiningRigController, Transition
from ..core.rig_config import RigConfig
from ..modules.depth import DepthModuleParameters
from ..modules.positioning import aggregate_depth
from ..modules.quadrant import QuadrantModuleParameters
from .sim_blocks import SimulatedGrid

# Discrete action -> request token delivered to the controller
ACTIONS = {0: None, 1: "Start", 2: "Stop"}


class MiningRigEnv(gym.Env):
    """Simulated mining rig driven by the controller (0.1 s base-step)."""

    metadata = {"render_modes": [], "render_fps": 10}

    def __init__(
        self,
        *,
        config: RigConfig = None,
        echo: Callable[[str], None] | None = None,
        piston_speed: float = 0.5,
        depth_params: DepthModuleParameters = None,
        quadrant_params: QuadrantModuleParameters = None,
    ):
        super().__init__()

        # ── Environment Configuration ───────────────────────────────────
        self.config = config or RigConfig()
        self.config.validate()

        self.dt = self.config.dt  # s
        self.piston_speed = piston_speed
        self.echo = echo or (lambda message: None)
        self.depth_params = depth_params
        self.quadrant_params = quadrant_params

        # ── Action / Observation Space ──────────────────────────────────
        self.action_space = spaces.Discrete(len(ACTIONS))
        # [depth, rotor angle, side, forward, quadrant, column]
        self.observation_space = spaces.Box(
            low=np.array([0.0, -360.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float32),
            high=np.array(
                [
                    self.config.max_depth,
                    360.0,
                    self.config.piston_span,
                    self.config.piston_span,
                    4.0,
                    self.config.piston_span,
                ],
                dtype=np.float32,
            ),
            dtype=np.float32,
        )

        self._build()

    def _build(self) -> None:
        self.grid = SimulatedGrid.for_config(self.config, self.piston_speed)
        self.controller = MiningRigController(
            self.grid,
            config=self.config,
            echo=self.echo,
            depth_params=self.depth_params,
            quadrant_params=self.quadrant_params,
        )
        self.time = 0.0
        self.started = False
        self.transitions: List[Transition] = []

    @property
    def state(self):
        return self.controller.state

    def block(self, role: str):
        """Simulated block bound to ``role``."""
        return self.grid.get_block_with_name(self.config.block_name(role))

    # --------------------------------------------------------------------- #
    # Gym API
    # --------------------------------------------------------------------- #
    def reset(self, *, seed: int | None = None, options=None):
        super().reset(seed=seed)
        self._build()
        return self._get_obs(), self._get_info([])

    def step(self, action):
        fired: List[str] = []

        request = ACTIONS[int(action)]
        if request is not None:
            self.started = True
            self.transitions.append(self.controller.run(request))

        # physics advance dt
        for token in self.grid.tick(self.dt):
            fired.append(token)
            self.transitions.append(self.controller.run(token))
        self.time += self.dt

        terminated = self.started and self.controller.state.is_idle
        return self._get_obs(), 0.0, terminated, False, self._get_info(fired)

    def run_until_idle(self, max_time: float = 1.0e5) -> bool:
        """Step without new requests until the controller has nothing pending."""
        deadline = self.time + max_time
        while self.time < deadline:
            _, _, terminated, _, _ = self.step(0)
            if terminated:
                return True
        return False

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _get_obs(self) -> np.ndarray:
        handles = self.controller.handles
        return np.array(
            [
                aggregate_depth(handles.depth_pistons),
                handles.rotor.angle(),
                handles.side_piston.current_position(),
                handles.forward_piston.current_position(),
                float(self.state.quadrant),
                self.state.column,
            ],
            dtype=np.float32,
        )

    def _get_info(self, fired: List[str]) -> dict:
        handles = self.controller.handles
        return {
            "time": self.time,
            "depth": aggregate_depth(handles.depth_pistons),
            "rotor_angle": handles.rotor.angle(),
            "side_position": handles.side_piston.current_position(),
            "forward_position": handles.forward_piston.current_position(),
            "drill_enabled": self.block("drill").enabled,
            "pending": self.controller.pending_token,
            "fired": fired,
            "trigger_step": bool(fired),
        }

# src/minerig/core/rig_config.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Any
import json
from pathlib import Path


def _default_block_names() -> Dict[str, str]:
    return {
        "rotor": "Advanced Rotor",
        "side_piston": "Piston Side",
        "forward_piston": "Piston Forward",
        "depth_piston_1": "Piston Depth 1",
        "depth_piston_2": "Piston Depth 2",
        "depth_piston_3": "Piston Depth 3",
        "depth_piston_4": "Piston Depth 4",
        "drill": "Drill",
        # Timer blocks, one per wait
        "depth_xy": "Timer Block (Wait DepthAdj XY)",
        "depth_rotation": "Timer Block (Wait DepthAdj Rotation)",
        "depth_z": "Timer Block (Wait DepthAdj Z)",
        "quad_rotation": "Timer Block (Wait QuadMine Rotation)",
        "quad_row": "Timer Block (Wait QuadMine Row)",
        "quad_column": "Timer Block (Wait QuadMine Col)",
        "quad_retract": "Timer Block (Wait QuadMine RetractXY)",
    }


def _default_trigger_delays() -> Dict[str, float]:
    # [s] Settle times for 0.5 m/s pistons and a 1 rad/s rotor
    return {
        "depth_xy": 21.0,
        "depth_rotation": 8.0,
        "depth_z": 21.0,
        "quad_rotation": 7.0,
        "quad_row": 21.0,
        "quad_column": 3.0,
        "quad_retract": 21.0,
    }


TRIGGER_ROLES = (
    "depth_xy",
    "depth_rotation",
    "depth_z",
    "quad_rotation",
    "quad_row",
    "quad_column",
    "quad_retract",
)

# Resume token delivered by each timer block when its countdown expires
TRIGGER_TOKENS = {
    "depth_xy": "ContinueDepthFromXY",
    "depth_rotation": "ContinueDepthFromRotation",
    "depth_z": "ContinueDepthFromZ",
    "quad_rotation": "ContinueQuadMineFromRotation",
    "quad_row": "ContinueQuadMineFromRow",
    "quad_column": "ContinueQuadMineFromCol",
    "quad_retract": "ContinueQuadMineFromRetractXY",
}


@dataclass
class RigConfig:
    """
    Fixed rig configuration that doesn't change while the controller runs.
    Defines the rig geometry, block names and simulator timing.
    """

    # ── Rig Geometry ──
    piston_span: float = 10.0  # [m] Travel of every piston
    depth_piston_count: int = 4  # Telescoping depth pistons
    depth_tolerance: float = 0.1  # [m] Slack on "fully extended" comparisons

    # ── Block Binding ──
    block_prefix: str = "AtmoMM -"
    block_names: Dict[str, str] = field(default_factory=_default_block_names)

    # ── Simulation Parameters ──
    dt: float = 0.1  # [s] Simulator timestep
    trigger_delays: Dict[str, float] = field(default_factory=_default_trigger_delays)

    # ── Trigger Guard ──
    reject_stale_triggers: bool = True  # Only accept the armed resume token

    @property
    def max_depth(self) -> float:
        """Aggregate travel of the depth piston stack."""
        return self.depth_piston_count * self.piston_span

    def block_name(self, role: str) -> str:
        """Full grid name of the block bound to ``role``."""
        return f"{self.block_prefix}{self.block_names[role]}"

    def depth_piston_roles(self) -> list[str]:
        return [f"depth_piston_{i + 1}" for i in range(self.depth_piston_count)]

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "RigConfig":
        """Create RigConfig from dictionary."""
        return cls(
            **{k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__}
        )

    @classmethod
    def from_json(cls, json_path: str | Path) -> "RigConfig":
        """Load RigConfig from JSON file."""
        json_path = Path(json_path)
        with open(json_path, "r") as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert RigConfig to dictionary."""
        return asdict(self)

    def to_json(self, json_path: str | Path) -> None:
        """Save RigConfig to JSON file."""
        json_path = Path(json_path)
        with open(json_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.piston_span <= 0:
            raise ValueError("piston_span must be positive")
        if self.depth_piston_count < 1:
            raise ValueError("depth_piston_count must be at least 1")
        if self.depth_tolerance < 0:
            raise ValueError("depth_tolerance must not be negative")
        if self.dt <= 0:
            raise ValueError("dt must be positive")

        missing = [
            role
            for role in ["rotor", "side_piston", "forward_piston", "drill"]
            + self.depth_piston_roles()
            + list(TRIGGER_ROLES)
            if role not in self.block_names
        ]
        if missing:
            raise ValueError(f"block_names is missing roles: {', '.join(missing)}")

        for role in TRIGGER_ROLES:
            if self.trigger_delays.get(role, 0.0) <= 0:
                raise ValueError(f"trigger_delays['{role}'] must be positive")

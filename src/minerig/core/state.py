# src/minerig/core/state.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Optional


# ──────────────────────────────────────────────────────────────────────────────
# Low-level types
# ──────────────────────────────────────────────────────────────────────────────
class QuadrantProgress(IntEnum):
    """Sector currently being (or just) mined on the XY plane."""

    NONE = 0  # No sector active, rotor not yet at the reference angle
    SECTOR_1 = 1  # 0   degrees
    SECTOR_2 = 2  # 90  degrees
    SECTOR_3 = 3  # 180 degrees
    SECTOR_4 = 4  # 270 degrees

    def next(self) -> "QuadrantProgress":
        return QuadrantProgress((self.value + 1) % 5)

    @property
    def rotor_limit(self) -> float:
        """Rotor upper limit [deg] commanded when this sector becomes active."""
        return SECTOR_ANGLES[self]


SECTOR_ANGLES = {
    QuadrantProgress.SECTOR_1: 0.0,
    QuadrantProgress.SECTOR_2: 90.0,
    QuadrantProgress.SECTOR_3: 180.0,
    QuadrantProgress.SECTOR_4: 270.0,
    QuadrantProgress.NONE: 360.0,  # wrap, all four sectors done
}


class DepthPhase(Enum):
    IDLE = auto()
    WAIT_XY = auto()
    WAIT_ROTATION = auto()
    WAIT_Z = auto()


class QuadPhase(Enum):
    IDLE = auto()
    WAIT_SECTOR_ROTATION = auto()
    WAIT_ROW = auto()
    WAIT_COLUMN = auto()
    WAIT_RETRACT = auto()


@dataclass(frozen=True)
class OperationCommand:
    """A depth adjustment request, kept until the adjustment sequence finishes."""

    depth: float  # Target aggregate depth
    start_quad: bool  # Mine the four sectors once the depth is reached
    drill_on: bool  # Drill enabled state once the depth is reached


@dataclass(frozen=True)
class PendingTrigger:
    """The one resume token the controller is currently waiting for."""

    token: str
    generation: int


# ──────────────────────────────────────────────────────────────────────────────
# Rig State - everything a continuation needs to resume correctly
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class RigState:
    """
    Controller state shared by the depth and quadrant machines.
    Physical positions are never cached here; they are read from the handles.
    """

    # ── Depth Adjustment ──
    command: Optional[OperationCommand] = None  # None once adjustment completes
    depth_phase: DepthPhase = DepthPhase.IDLE

    # ── Quadrant Mining ──
    quadrant: QuadrantProgress = QuadrantProgress.NONE
    column: float = 0.0  # Column cursor along the forward axis
    quad_phase: QuadPhase = QuadPhase.IDLE

    # ── Trigger Bookkeeping ──
    generation: int = 0  # Bumped by every depth adjustment request
    pending: Optional[PendingTrigger] = None  # Expected resume token

    @property
    def is_idle(self) -> bool:
        return (
            self.pending is None
            and self.depth_phase is DepthPhase.IDLE
            and self.quad_phase is QuadPhase.IDLE
        )

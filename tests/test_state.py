"""Tests for rig state types."""

import dataclasses

import pytest

from minerig.core.state import (
    DepthPhase,
    OperationCommand,
    PendingTrigger,
    QuadPhase,
    QuadrantProgress,
    RigState,
)


class TestQuadrantProgress:
    """Test the sector cycle."""

    def test_cycle(self):
        """Progress advances NONE -> 1 -> 2 -> 3 -> 4 -> NONE."""
        progress = QuadrantProgress.NONE
        seen = []
        for _ in range(6):
            progress = progress.next()
            seen.append(progress)

        assert seen == [
            QuadrantProgress.SECTOR_1,
            QuadrantProgress.SECTOR_2,
            QuadrantProgress.SECTOR_3,
            QuadrantProgress.SECTOR_4,
            QuadrantProgress.NONE,
            QuadrantProgress.SECTOR_1,
        ]

    def test_rotor_limits(self):
        """Each sector maps to a fixed rotor limit."""
        assert QuadrantProgress.SECTOR_1.rotor_limit == 0.0
        assert QuadrantProgress.SECTOR_2.rotor_limit == 90.0
        assert QuadrantProgress.SECTOR_3.rotor_limit == 180.0
        assert QuadrantProgress.SECTOR_4.rotor_limit == 270.0
        assert QuadrantProgress.NONE.rotor_limit == 360.0


class TestRigState:
    """Test RigState defaults."""

    def test_state_creation(self):
        """Fresh state has no command and nothing pending."""
        state = RigState()
        assert state.command is None
        assert state.quadrant is QuadrantProgress.NONE
        assert state.column == 0.0
        assert state.generation == 0
        assert state.depth_phase is DepthPhase.IDLE
        assert state.quad_phase is QuadPhase.IDLE
        assert state.is_idle

    def test_pending_trigger_is_not_idle(self):
        """A pending trigger means an operation is in flight."""
        state = RigState(pending=PendingTrigger("ContinueDepthFromXY", 1))
        assert not state.is_idle

    def test_command_is_immutable(self):
        """Operation commands are replaced, never edited."""
        command = OperationCommand(5.0, True, False)
        with pytest.raises(dataclasses.FrozenInstanceError):
            command.depth = 6.0

"""Tests for the controller's token dispatch and trigger bookkeeping."""

import pytest

from minerig import (
    BindingError,
    DepthPhase,
    MiningRigController,
    OperationCommand,
    QuadPhase,
    QuadrantProgress,
    RigConfig,
    RigState,
)
from minerig.core.rig_config import TRIGGER_ROLES


def advance_to_first_row(rig):
    rig.run("Start")
    for token in (
        "ContinueDepthFromXY",
        "ContinueDepthFromRotation",
        "ContinueDepthFromZ",
        "ContinueQuadMineFromRotation",
    ):
        assert rig.run(token).accepted


class TestDispatch:
    """Test routing of external arguments."""

    def test_unrecognized_command(self, rig, block, messages):
        """Unknown arguments are reported and change nothing."""
        transition = rig.run("Dig")

        assert not transition.accepted
        assert transition.armed is None
        assert "Error: Unrecognized command was received: Dig" in messages
        assert rig.state == RigState()
        assert not any(block(role).running for role in TRIGGER_ROLES)

    def test_argument_whitespace(self, rig):
        assert rig.run(" Start\n").accepted

    def test_walk_through_sector(self, rig):
        """Tokens follow the armed trigger through a row and a column."""
        advance_to_first_row(rig)
        assert rig.state.quad_phase is QuadPhase.WAIT_ROW

        transition = rig.run("ContinueQuadMineFromRow")
        assert transition.armed == "quad_column"
        assert rig.state.column == 1.0

        transition = rig.run("ContinueQuadMineFromCol")
        assert transition.armed == "quad_row"


class TestStaleTriggers:
    """Test rejection of tokens the controller is not waiting on."""

    def test_out_of_order_token_rejected(self, rig, messages):
        rig.run("Start")
        transition = rig.run("ContinueDepthFromZ")

        assert not transition.accepted
        assert rig.state.command == OperationCommand(0.0, True, True)
        assert rig.state.depth_phase is DepthPhase.WAIT_XY
        assert rig.pending_token == "ContinueDepthFromXY"
        assert any(m.startswith("Ignoring stale ContinueDepthFromZ") for m in messages)

    def test_double_delivery_rejected(self, rig):
        """The same timer firing twice only advances once."""
        rig.run("Start")
        assert rig.run("ContinueDepthFromXY").accepted
        assert not rig.run("ContinueDepthFromXY").accepted
        assert rig.state.depth_phase is DepthPhase.WAIT_ROTATION

    def test_old_generation_rejected(self, rig):
        """A token tagged with a superseded operation is refused."""
        rig.run("Start")
        rig.run("Stop")
        assert rig.state.generation == 2

        assert not rig.run("ContinueDepthFromXY", generation=1).accepted
        assert rig.run("ContinueDepthFromXY", generation=2).accepted

    def test_stop_during_mining_cancels_everything(self, rig, block):
        """Stop in the middle of a sector cancels both machines' timers."""
        advance_to_first_row(rig)
        assert block("quad_row").running

        transition = rig.run("Stop")

        running = [role for role in TRIGGER_ROLES if block(role).running]
        assert running == ["depth_xy"]
        assert rig.state.command == OperationCommand(0.0, False, False)
        assert rig.state.quadrant is QuadrantProgress.NONE
        assert rig.state.quad_phase is QuadPhase.IDLE
        assert transition.armed == "depth_xy"

        # The superseded row timer firing late is ignored
        assert not rig.run("ContinueQuadMineFromRow").accepted
        assert rig.state.column == 0.0

    def test_guard_disabled(self, grid, messages):
        """Without the guard every recognised token runs."""
        rig = MiningRigController(
            grid, config=RigConfig(reject_stale_triggers=False), echo=messages.append
        )
        rig.run("Start")
        transition = rig.run("ContinueDepthFromRotation")

        assert transition.accepted
        assert transition.armed == "depth_z"


class TestBinding:
    """Test block lookup at construction."""

    def test_missing_blocks_fail_fast(self, grid, config):
        grid.remove(config.block_name("drill"))
        grid.remove(config.block_name("quad_row"))

        with pytest.raises(BindingError) as excinfo:
            MiningRigController(grid, config=config, echo=lambda m: None)

        assert excinfo.value.missing == [
            "AtmoMM -Drill",
            "AtmoMM -Timer Block (Wait QuadMine Row)",
        ]
        assert "AtmoMM -Drill" in str(excinfo.value)

    def test_reads_are_not_journaled(self, rig):
        """Only commands appear in a transition, never position reads."""
        rig.run("Start")
        transition = rig.run("ContinueDepthFromXY")

        actions = {c.action for c in transition.commands}
        assert "angle" not in actions
        assert actions == {
            "set_upper_bound_degrees",
            "set_lower_bound_degrees",
            "set_target_velocity",
            "start_countdown",
        }

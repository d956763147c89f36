"""Tests for the depth adjustment machine."""

import pytest

from minerig import (
    ActuatorCommand,
    DepthModuleParameters,
    DepthPhase,
    MiningRigController,
    OperationCommand,
    QuadrantProgress,
)
from minerig.core.rig_config import TRIGGER_ROLES


def running_timers(block):
    return [role for role in TRIGGER_ROLES if block(role).running]


class TestAdjustDepth:
    """Test the first step of a depth adjustment."""

    def test_start_stores_command(self, rig):
        """Start requests depth 0 with mining and drill on."""
        transition = rig.run("Start")

        assert transition.accepted
        assert rig.state.command == OperationCommand(0.0, True, True)
        assert rig.state.quadrant is QuadrantProgress.NONE
        assert rig.state.depth_phase is DepthPhase.WAIT_XY
        assert rig.state.generation == 1
        assert rig.pending_token == "ContinueDepthFromXY"

    def test_stop_stores_command(self, rig):
        """Stop requests depth 0 with mining and drill off."""
        rig.run("Stop")
        assert rig.state.command == OperationCommand(0.0, False, False)

    def test_retracts_xy_and_arms_one_timer(self, rig, block):
        """Horizontal pistons retract, depth pistons halt, only the XY timer runs."""
        transition = rig.run("Start")

        assert ActuatorCommand("side_piston", "set_velocity", (-0.5,)) in transition.commands
        assert ActuatorCommand("forward_piston", "set_velocity", (-0.5,)) in transition.commands
        for i in range(1, 5):
            assert block(f"depth_piston_{i}").velocity == 0.0
        assert transition.armed == "depth_xy"
        assert running_timers(block) == ["depth_xy"]

    def test_cancels_every_pending_timer(self, rig, block):
        """Timers armed by a previous operation are stopped."""
        for role in TRIGGER_ROLES:
            block(role).start_countdown()

        transition = rig.run("Stop")

        stops = [c.target for c in transition.commands if c.action == "stop_countdown"]
        assert sorted(stops) == sorted(TRIGGER_ROLES)
        assert running_timers(block) == ["depth_xy"]

    def test_new_request_replaces_command(self, rig):
        """A second request overwrites the first."""
        rig.adjust_depth(12.0, True, False)
        rig.run("Stop")
        assert rig.state.command == OperationCommand(0.0, False, False)
        assert rig.state.generation == 2

    @pytest.mark.parametrize("depth", [-0.5, 40.5])
    def test_depth_out_of_range(self, rig, depth):
        """Depth outside the piston stack travel is refused."""
        with pytest.raises(ValueError):
            rig.adjust_depth(depth, False, False)
        assert rig.state.command is None


class TestDepthContinuations:
    """Test the settled steps of a depth adjustment."""

    def test_from_xy_rotates_to_zero(self, rig, block):
        rig.run("Start")
        transition = rig.run("ContinueDepthFromXY")

        rotor = block("rotor")
        assert rotor.upper == 0.0
        assert rotor.lower == 0.0
        assert rotor.velocity == 1.0
        assert transition.armed == "depth_rotation"
        assert rig.state.depth_phase is DepthPhase.WAIT_ROTATION

    def test_from_xy_rotates_back_from_sector(self, rig, block):
        """A rotor past the reference angle turns backwards."""
        block("rotor")._angle = 270.0
        rig.run("Start")
        rig.run("ContinueDepthFromXY")
        assert block("rotor").velocity == -1.0

    def test_from_rotation_sets_depth(self, rig, block):
        rig.adjust_depth(12.5, False, True)
        rig.run("ContinueDepthFromXY")
        transition = rig.run("ContinueDepthFromRotation")

        assert block("depth_piston_1").upper == 10.0
        assert block("depth_piston_2").upper == 2.5
        assert block("depth_piston_3").velocity == 0.0
        assert transition.armed == "depth_z"
        assert rig.state.depth_phase is DepthPhase.WAIT_Z

    def test_from_z_without_mining(self, rig, block):
        """Depth-only request finishes the operation."""
        rig.adjust_depth(3.0, False, True)
        for token in ("ContinueDepthFromXY", "ContinueDepthFromRotation"):
            rig.run(token)
        transition = rig.run("ContinueDepthFromZ")

        assert block("drill").enabled
        assert rig.state.command is None
        assert transition.armed is None
        assert rig.state.is_idle

    def test_from_z_hands_off_to_quadrant(self, rig, block, messages):
        """Start ends the depth adjustment by beginning sector 1."""
        rig.run("Start")
        for token in ("ContinueDepthFromXY", "ContinueDepthFromRotation"):
            rig.run(token)
        transition = rig.run("ContinueDepthFromZ")

        assert block("drill").enabled
        assert rig.state.command is None
        assert rig.state.quadrant is QuadrantProgress.SECTOR_1
        assert block("rotor").upper == 0.0
        assert transition.armed == "quad_rotation"
        assert "Starting to mine quad" in messages


class TestDepthModuleParameters:
    """Test depth parameter validation."""

    def test_defaults_are_valid(self):
        DepthModuleParameters().validate()

    @pytest.mark.parametrize("name", ["xy_retract_speed", "z_speed", "rotor_velocity"])
    @pytest.mark.parametrize("value", [0.0, -0.5])
    def test_non_positive_rate_rejected(self, name, value):
        with pytest.raises(ValueError, match=name):
            DepthModuleParameters(**{name: value}).validate()

    def test_controller_rejects_invalid_parameters(self, grid, config, messages):
        """A negative retract speed would drive the pistons outward."""
        with pytest.raises(ValueError, match="xy_retract_speed"):
            MiningRigController(
                grid,
                config=config,
                echo=messages.append,
                depth_params=DepthModuleParameters(xy_retract_speed=-0.5),
            )

# src/minerig/modules/depth.py
from __future__ import annotations

from dataclasses import dataclass

from ..core.module import RigModule
from ..core.state import DepthPhase, OperationCommand, QuadPhase, QuadrantProgress
from .positioning import set_depth


# ──────────────────────────────────────────────────────────────────────────────
# Depth Module Parameters - Defined within module
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class DepthModuleParameters:
    """Depth adjustment specific parameters."""

    # ── Motion Rates ──
    xy_retract_speed: float = 0.5  # [m/s] Horizontal piston retract rate
    z_speed: float = 0.5  # [m/s] Depth piston rate
    rotor_velocity: float = 1.0  # [rad/s] Rotor rate toward the reference angle

    # ── Reference Pose ──
    reference_angle: float = 0.0  # [deg] Rotor angle for a depth change

    def validate(self) -> None:
        """Validate motion rates."""
        for name in ("xy_retract_speed", "z_speed", "rotor_velocity"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")


class DepthAdjustmentModule(RigModule):
    """
    Moves the depth piston stack to a target depth in three settled steps.

    1) Bring in the pistons on the XY plane
    2) Rotate the mining assembly to the reference angle
    3) Adjust the depth pistons

    Each step issues its commands, arms one timer and returns; the timer's
    resume token re-enters the controller at the next step.
    """

    def __init__(self, rig, parameters: DepthModuleParameters = None):
        super().__init__(rig)
        self.params = parameters or DepthModuleParameters()
        self.params.validate()

    def adjust_depth(self, depth: float, start_quad: bool, drill_on: bool) -> None:
        """
        Start a depth adjustment, superseding whatever operation was running.

        Raises:
            ValueError: if ``depth`` is outside the travel of the piston stack.
        """
        if not 0.0 <= depth <= self.config.max_depth:
            raise ValueError(
                f"depth must be within [0, {self.config.max_depth}], got {depth}"
            )

        # Nothing armed by a previous operation may fire into this one
        self.rig.stop_all_triggers()
        self.state.generation += 1

        self.state.quadrant = QuadrantProgress.NONE
        self.state.column = 0.0
        self.state.quad_phase = QuadPhase.IDLE
        self.state.command = OperationCommand(float(depth), start_quad, drill_on)

        for piston in self.handles.depth_pistons:
            piston.set_velocity(0.0)

        self.echo("Retracting X and Y pistons for depth adjustment")
        for piston in self.handles.horizontal_pistons:
            piston.set_velocity(-self.params.xy_retract_speed)

        self.echo("Calling DepthAdj XY wait timer block")
        self.state.depth_phase = DepthPhase.WAIT_XY
        self.rig.arm("depth_xy")

    def continue_from_xy(self) -> None:
        rotor = self.handles.rotor
        angle = self.params.reference_angle

        self.echo(f"Rotating miner assembly to {angle:g} degrees for depth adjustment")
        rotor.set_upper_bound_degrees(angle)
        rotor.set_lower_bound_degrees(angle)
        if rotor.angle() > angle:
            rotor.set_target_velocity(-self.params.rotor_velocity)
        else:
            rotor.set_target_velocity(self.params.rotor_velocity)

        self.echo("Calling DepthAdj rotate wait timer block")
        self.state.depth_phase = DepthPhase.WAIT_ROTATION
        self.rig.arm("depth_rotation")

    def continue_from_rotation(self) -> None:
        command = self.state.command
        if command is not None:
            self.echo(
                f"Adjusting the miner assembly depth to target Z of {command.depth:g}"
            )
            set_depth(
                self.handles.depth_pistons,
                command.depth,
                self.config.piston_span,
                self.params.z_speed,
            )

        self.echo("Calling DepthAdj Z wait timer block")
        self.state.depth_phase = DepthPhase.WAIT_Z
        self.rig.arm("depth_z")

    def continue_from_z(self) -> None:
        command = self.state.command
        self.state.depth_phase = DepthPhase.IDLE
        # The only point where an operation counts as finished
        self.state.command = None

        if command is not None:
            self.handles.drill.set_enabled(command.drill_on)

            if command.start_quad:
                self.echo("Starting to mine quad")
                self.rig.quadrant.do_next_quad()
            else:
                self.echo("Depth adjustment complete")

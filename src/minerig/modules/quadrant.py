# src/minerig/modules/quadrant.py
from __future__ import annotations

from dataclasses import dataclass

from ..core.module import RigModule
from ..core.state import QuadPhase, QuadrantProgress
from .positioning import aggregate_depth, set_piston_position


# ──────────────────────────────────────────────────────────────────────────────
# Quadrant Module Parameters - Defined within module
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class QuadrantModuleParameters:
    """Quadrant mining specific parameters."""

    # ── Sweep Geometry ──
    sector_width: float = 10.0  # [m] Column cursor bound within a sector
    column_step: float = 1.0  # [m] Forward advance per mined row
    layer_step: float = 1.0  # [m] Depth advance once all four sectors are mined

    # ── Motion Rates ──
    column_speed: float = 0.5  # [m/s] Forward piston rate between rows
    rotor_velocity: float = 1.0  # [rad/s] Rotor rate between sectors

    def validate(self) -> None:
        """Validate sweep geometry and motion rates."""
        for name in (
            "sector_width",
            "column_step",
            "layer_step",
            "column_speed",
            "rotor_velocity",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")


class QuadrantMiningModule(RigModule):
    """
    Mines the four 90 degree sectors of one depth layer.

    Within a sector the side piston sweeps a row, alternating direction every
    row, while the forward piston steps one column between rows. Once the
    fourth sector is done control goes back to the depth machine, either for
    the next layer or for a final reset.
    """

    def __init__(self, rig, parameters: QuadrantModuleParameters = None):
        super().__init__(rig)
        self.params = parameters or QuadrantModuleParameters()
        self.params.validate()

    def do_next_quad(self) -> None:
        rotor = self.handles.rotor
        previous = self.state.quadrant

        self.echo(
            f"Current angle is {rotor.angle():g}. Last quad mined was {previous.name}"
        )

        current = previous.next()
        self.state.quadrant = current
        rotor.set_upper_bound_degrees(current.rotor_limit)

        if current is QuadrantProgress.NONE:
            self.echo("Quad 4 done. Ready to increase depth or reset and finish")
            self.state.quad_phase = QuadPhase.IDLE
            self._finish_layer()
            return

        if previous is QuadrantProgress.NONE:
            self.echo("No Quad being mined. Starting Quad 1")
        else:
            self.echo(
                f"Quad {previous.value} done, rotating to Quad {current.value}"
            )

        rotor.set_target_velocity(self.params.rotor_velocity)
        self.state.quad_phase = QuadPhase.WAIT_SECTOR_ROTATION
        self.rig.arm("quad_rotation")

    def _finish_layer(self) -> None:
        # Depth machine arms the next trigger itself
        depth = aggregate_depth(self.handles.depth_pistons)
        max_depth = self.config.max_depth

        if depth >= max_depth - self.config.depth_tolerance:
            self.echo(f"Reached maximum depth of {depth:g}. Mining complete")
            self.rig.depth.adjust_depth(0.0, False, False)
        else:
            next_depth = min(depth + self.params.layer_step, max_depth)
            self.echo(f"Layer at depth {depth:g} done, starting depth {next_depth:g}")
            self.rig.depth.adjust_depth(next_depth, True, True)

    def continue_from_rotation(self) -> None:
        if self.state.quadrant is QuadrantProgress.NONE:
            self.echo("No quad being mined, nothing to do after rotation")
            self.state.quad_phase = QuadPhase.IDLE
            return

        self.begin_mining_quad()

    def begin_mining_quad(self) -> None:
        """Start a sector; assumes XY pistons retracted and the rotor on the sector."""
        self.state.column = 0.0
        self.mine_row()

    def mine_row(self) -> None:
        side = self.handles.side_piston
        if side.current_position() > 0.0:
            self.echo("Mining a row by retracting the side piston")
            side.retract()
        else:
            self.echo("Mining a row by extending the side piston")
            side.extend()

        self.state.quad_phase = QuadPhase.WAIT_ROW
        self.rig.arm("quad_row")

    def continue_from_row(self) -> None:
        bound = self.params.sector_width - self.config.depth_tolerance
        if self.state.column > bound:
            self.echo(f"Quad {self.state.quadrant.value} swept, retracting X and Y")
            for piston in self.handles.horizontal_pistons:
                piston.retract()
            self.state.quad_phase = QuadPhase.WAIT_RETRACT
            self.rig.arm("quad_retract")
            return

        self.state.column += self.params.column_step
        self.echo(f"Moving to column {self.state.column:g}")
        set_piston_position(
            self.handles.forward_piston, self.state.column, self.params.column_speed
        )
        self.state.quad_phase = QuadPhase.WAIT_COLUMN
        self.rig.arm("quad_column")

    def continue_from_column(self) -> None:
        self.mine_row()

    def continue_from_retract(self) -> None:
        self.do_next_quad()

# src/minerig/controller.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .core.hardware import ActuatorCommand, BlockRegistry, CommandJournal, bind_rig
from .core.rig_config import RigConfig, TRIGGER_ROLES, TRIGGER_TOKENS
from .core.state import DepthPhase, PendingTrigger, QuadPhase, RigState
from .modules.depth import DepthAdjustmentModule, DepthModuleParameters
from .modules.quadrant import QuadrantMiningModule, QuadrantModuleParameters

REQUEST_TOKENS = ("Start", "Stop")


@dataclass(frozen=True)
class Transition:
    """Outcome of delivering one token to the controller."""

    token: str
    accepted: bool
    depth_phase: DepthPhase
    quad_phase: QuadPhase
    commands: Tuple[ActuatorCommand, ...] = ()
    armed: Optional[str] = None  # Trigger role armed, None if nothing to wait on


class MiningRigController:
    """
    Entry point for the mining rig: one call per external signal.

    Every call runs exactly one continuation to completion and returns. A
    continuation that has to wait arms one timer block; when the timer
    expires it delivers its token back to :meth:`run`.
    """

    def __init__(
        self,
        registry: BlockRegistry,
        *,
        config: RigConfig = None,
        echo: Callable[[str], None] = print,
        depth_params: DepthModuleParameters = None,
        quadrant_params: QuadrantModuleParameters = None,
    ):
        # ── Configuration ───────────────────────────────────────────────
        self.config = config or RigConfig()
        self.config.validate()
        self.echo = echo

        # ── Blocks ──────────────────────────────────────────────────────
        self.echo("Initializing AtmoMM rotor script...")
        self.journal = CommandJournal()
        self.handles = bind_rig(registry, self.config, self.journal)

        # ── State ───────────────────────────────────────────────────────
        self.state = RigState()
        self._armed: Optional[str] = None

        # ── State Machines ──────────────────────────────────────────────
        self.depth = DepthAdjustmentModule(self, depth_params)
        self.quadrant = QuadrantMiningModule(self, quadrant_params)

        self._handlers: Dict[str, Callable[[], None]] = {
            "Start": self._start,
            "Stop": self._stop,
            "ContinueDepthFromXY": self.depth.continue_from_xy,
            "ContinueDepthFromRotation": self.depth.continue_from_rotation,
            "ContinueDepthFromZ": self.depth.continue_from_z,
            "ContinueQuadMineFromRotation": self.quadrant.continue_from_rotation,
            "ContinueQuadMineFromRow": self.quadrant.continue_from_row,
            "ContinueQuadMineFromCol": self.quadrant.continue_from_column,
            "ContinueQuadMineFromRetractXY": self.quadrant.continue_from_retract,
        }

    # --------------------------------------------------------------------- #
    # Entry points
    # --------------------------------------------------------------------- #
    def run(self, argument: str, generation: int | None = None) -> Transition:
        """Route an external argument, reporting unknown or stale tokens."""
        return self.resume(argument.strip(), generation)

    def resume(self, token: str, generation: int | None = None) -> Transition:
        handler = self._handlers.get(token)
        if handler is None:
            self.echo(f"Error: Unrecognized command was received: {token}")
            return self._transition(token, accepted=False)

        if token not in REQUEST_TOKENS and not self._accepts(token, generation):
            return self._transition(token, accepted=False)

        self.journal.drain()
        self._armed = None
        if token not in REQUEST_TOKENS:
            # Consumed: a second delivery of the same token is stale
            self.state.pending = None

        self.echo(f"{token} command was received")
        handler()
        return self._transition(token, accepted=True)

    def adjust_depth(self, depth: float, start_quad: bool, drill_on: bool) -> Transition:
        """Request a depth adjustment directly, bypassing the token table."""
        self.journal.drain()
        self._armed = None
        self.depth.adjust_depth(depth, start_quad, drill_on)
        return self._transition("AdjustDepth", accepted=True)

    # --------------------------------------------------------------------- #
    # Trigger bookkeeping used by the state machines
    # --------------------------------------------------------------------- #
    def arm(self, role: str) -> None:
        """Start the countdown of one timer block and expect its token."""
        self.handles.triggers[role].start_countdown()
        self.state.pending = PendingTrigger(TRIGGER_TOKENS[role], self.state.generation)
        self._armed = role

    def stop_all_triggers(self) -> None:
        for role in TRIGGER_ROLES:
            self.handles.triggers[role].stop_countdown()
        self.state.pending = None
        self._armed = None

    @property
    def pending_token(self) -> Optional[str]:
        return self.state.pending.token if self.state.pending else None

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _start(self) -> None:
        self.depth.adjust_depth(0.0, True, True)

    def _stop(self) -> None:
        self.depth.adjust_depth(0.0, False, False)

    def _accepts(self, token: str, generation: int | None) -> bool:
        if not self.config.reject_stale_triggers:
            return True

        pending = self.state.pending
        if pending is None or pending.token != token:
            self.echo(
                f"Ignoring stale {token}: waiting on {pending.token if pending else 'nothing'}"
            )
            return False
        if generation is not None and generation != pending.generation:
            self.echo(
                f"Ignoring stale {token} from operation {generation}, "
                f"current operation is {pending.generation}"
            )
            return False
        return True

    def _transition(self, token: str, accepted: bool) -> Transition:
        return Transition(
            token=token,
            accepted=accepted,
            depth_phase=self.state.depth_phase,
            quad_phase=self.state.quad_phase,
            commands=self.journal.drain() if accepted else (),
            armed=self._armed if accepted else None,
        )

# src/minerig/core/hardware.py
"""
Collaborator interfaces the controller drives, and the start-up binding step.

The controller never touches a block directly: every bound block is wrapped
in a :class:`CommandTap` which forwards calls to the block and journals the
commands issued, so each invocation can report what it commanded.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .rig_config import RigConfig, TRIGGER_ROLES


# ──────────────────────────────────────────────────────────────────────────────
# Collaborator protocols
# ──────────────────────────────────────────────────────────────────────────────
class Piston(Protocol):
    def current_position(self) -> float: ...

    def set_velocity(self, velocity: float) -> None: ...

    def set_upper_bound(self, position: float) -> None: ...

    def set_lower_bound(self, position: float) -> None: ...

    def retract(self) -> None: ...

    def extend(self) -> None: ...


class Rotor(Protocol):
    def angle(self) -> float: ...  # [deg]

    def set_upper_bound_degrees(self, angle: float) -> None: ...

    def set_lower_bound_degrees(self, angle: float) -> None: ...

    def set_target_velocity(self, velocity: float) -> None: ...  # [rad/s]


class Tool(Protocol):
    def set_enabled(self, enabled: bool) -> None: ...


class Trigger(Protocol):
    def start_countdown(self) -> None: ...

    def stop_countdown(self) -> None: ...


class BlockRegistry(Protocol):
    def get_block_with_name(self, name: str) -> Optional[Any]: ...


# Calls that change a block; everything else (position/angle reads) passes through
COMMAND_METHODS = frozenset(
    {
        "set_velocity",
        "set_upper_bound",
        "set_lower_bound",
        "retract",
        "extend",
        "set_upper_bound_degrees",
        "set_lower_bound_degrees",
        "set_target_velocity",
        "set_enabled",
        "start_countdown",
        "stop_countdown",
    }
)


class BindingError(LookupError):
    """One or more rig blocks could not be found by name."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            "Failed to get blocks by name: " + ", ".join(repr(n) for n in missing)
        )


@dataclass(frozen=True)
class ActuatorCommand:
    target: str  # Role of the block, e.g. "side_piston"
    action: str  # Method called on the block
    args: Tuple[Any, ...] = ()


class CommandJournal:
    """Collects the commands issued during one controller invocation."""

    def __init__(self):
        self.entries: List[ActuatorCommand] = []

    def record(self, command: ActuatorCommand) -> None:
        self.entries.append(command)

    def drain(self) -> Tuple[ActuatorCommand, ...]:
        entries, self.entries = tuple(self.entries), []
        return entries


class CommandTap:
    """Forwards calls to a block, journaling every command method invoked."""

    def __init__(self, role: str, block: Any, journal: CommandJournal):
        self.role = role
        self.block = block
        self._journal = journal

    def __getattr__(self, name: str):
        attr = getattr(self.block, name)
        if name not in COMMAND_METHODS:
            return attr

        def issue(*args):
            self._journal.record(ActuatorCommand(self.role, name, args))
            return attr(*args)

        return issue

    def __repr__(self) -> str:
        return f"CommandTap({self.role!r}, {self.block!r})"


# ──────────────────────────────────────────────────────────────────────────────
# Binding
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class RigHandles:
    rotor: Rotor
    side_piston: Piston
    forward_piston: Piston
    depth_pistons: Tuple[Piston, ...]
    drill: Tool
    triggers: Dict[str, Trigger] = field(default_factory=dict)

    @property
    def horizontal_pistons(self) -> Tuple[Piston, Piston]:
        return (self.side_piston, self.forward_piston)


def bind_rig(
    registry: BlockRegistry, config: RigConfig, journal: CommandJournal
) -> RigHandles:
    """
    Resolve every rig block by name.

    Raises:
        BindingError: listing every name that could not be resolved, so a
            rig with a missing block never reaches its first command.
    """
    roles = (
        ["rotor", "side_piston", "forward_piston", "drill"]
        + config.depth_piston_roles()
        + list(TRIGGER_ROLES)
    )

    blocks: Dict[str, Any] = {}
    missing: List[str] = []
    for role in roles:
        name = config.block_name(role)
        block = registry.get_block_with_name(name)
        if block is None:
            missing.append(name)
        else:
            blocks[role] = CommandTap(role, block, journal)

    if missing:
        raise BindingError(missing)

    return RigHandles(
        rotor=blocks["rotor"],
        side_piston=blocks["side_piston"],
        forward_piston=blocks["forward_piston"],
        depth_pistons=tuple(blocks[r] for r in config.depth_piston_roles()),
        drill=blocks["drill"],
        triggers={role: blocks[role] for role in TRIGGER_ROLES},
    )

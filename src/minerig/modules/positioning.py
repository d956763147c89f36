# src/minerig/modules/positioning.py
"""
Piston positioning helpers shared by both state machines.

Moves are commanded, never verified: a helper issues its commands once and
the caller relies on an elapsed-time trigger to assume the move finished.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.hardware import Piston


def set_piston_position(piston: Piston, target: float, speed: float = 0.5) -> None:
    """Drive ``piston`` toward ``target`` by bounding its travel at the target."""
    current = piston.current_position()
    if current < target:
        piston.set_upper_bound(target)
        piston.set_velocity(speed)
    elif current > target:
        piston.set_lower_bound(target)
        piston.set_velocity(-speed)
    else:
        piston.set_velocity(0.0)


def depth_targets(depth: float, count: int = 4, span: float = 10.0) -> np.ndarray:
    """
    Partition an aggregate depth across a telescoping piston stack.

    Piston k absorbs up to its full span before piston k+1 absorbs any of
    the remainder: ``target[k] = clip(depth - k * span, 0, span)``.
    """
    offsets = np.arange(count, dtype=np.float64) * span
    return np.clip(depth - offsets, 0.0, span)


def set_depth(
    pistons: Sequence[Piston], depth: float, span: float = 10.0, speed: float = 0.5
) -> np.ndarray:
    targets = depth_targets(depth, len(pistons), span)
    for piston, target in zip(pistons, targets):
        set_piston_position(piston, float(target), speed)
    return targets


def aggregate_depth(pistons: Sequence[Piston]) -> float:
    """Total drilled depth, the sum of every depth piston's extension."""
    return float(np.sum([p.current_position() for p in pistons]))

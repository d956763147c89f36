from .depth import DepthAdjustmentModule, DepthModuleParameters
from .positioning import aggregate_depth, depth_targets, set_depth, set_piston_position
from .quadrant import QuadrantMiningModule, QuadrantModuleParameters

__all__ = [
    "DepthAdjustmentModule",
    "DepthModuleParameters",
    "QuadrantMiningModule",
    "QuadrantModuleParameters",
    "aggregate_depth",
    "depth_targets",
    "set_depth",
    "set_piston_position",
]

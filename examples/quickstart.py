#!/usr/bin/env python3
"""
Quick start example for the mining rig controller.

Runs the simulated rig from a Start request through the four sectors of the
surface layer and into the next layer, logging rig signals to JSON.
"""

from datetime import datetime

from minerig import MiningRigEnv, RigConfig, QuadrantModuleParameters
from minerig.utils.logger import SimulationLogger


def main():
    print("=== Mining Rig Quick Start ===\n")

    # Narrower sectors keep the demo short
    config = RigConfig(dt=0.5)
    env = MiningRigEnv(
        config=config,
        echo=print,
        quadrant_params=QuadrantModuleParameters(sector_width=4.0),
    )

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    json_filepath = f"quickstart_data_{timestamp}.json"

    sim_logger_config = {
        "signals_to_log": [
            "time",
            "depth",
            "rotor_angle",
            "side_position",
            "forward_position",
            "quadrant",
            "column",
        ],
        "log_frequency": {"type": "every_step"},
        "backend": {"type": "json", "filepath": json_filepath, "indent": 2},
    }
    sim_logger = SimulationLogger(sim_logger_config)

    obs, info = env.reset()
    obs, reward, terminated, truncated, info = env.step(1)  # Start

    print("Running simulation...")
    for _ in range(20000):
        obs, reward, terminated, truncated, info = env.step(0)
        sim_logger.collect(env.state, info)

        if env.state.generation == 2:
            print(f"\nFirst layer mined after {env.time:.0f} s")
            break

    sim_logger.finalize()

    print("\n=== Simulation Complete ===")
    print(f"Next layer depth: {env.state.command.depth if env.state.command else None}")
    print(f"Timers fired: {sum(1 for t in env.transitions if t.accepted) - 1}")
    print(f"\n✅ Data saved to: {json_filepath}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Visualization example for the mining rig controller.

Plots the serpentine path of the drill head through one sector and the rotor
angle over a full layer.

Note: Requires matplotlib to be installed:
    pip install matplotlib
"""

import numpy as np

try:
    import matplotlib.pyplot as plt
except ImportError:
    print("This example requires matplotlib. Install it with: pip install matplotlib")
    exit(1)

from minerig import MiningRigEnv, QuadrantProgress, RigConfig


def main():
    print("=== Mining Rig Visualization Example ===\n")

    env = MiningRigEnv(config=RigConfig(dt=0.5))
    env.reset()
    env.step(1)  # Start

    times, angles, side, forward, sector_1 = [], [], [], [], []
    while env.state.generation < 2:
        obs, reward, terminated, truncated, info = env.step(0)
        times.append(info["time"])
        angles.append(info["rotor_angle"])
        side.append(info["side_position"])
        forward.append(info["forward_position"])
        sector_1.append(env.state.quadrant is QuadrantProgress.SECTOR_1)

    mask = np.array(sector_1)
    fig, (ax_path, ax_angle) = plt.subplots(1, 2, figsize=(12, 5))

    ax_path.plot(np.array(side)[mask], np.array(forward)[mask])
    ax_path.set_xlabel("Side piston [m]")
    ax_path.set_ylabel("Forward piston [m]")
    ax_path.set_title("Sector 1 sweep")

    ax_angle.plot(times, angles)
    ax_angle.set_xlabel("Time [s]")
    ax_angle.set_ylabel("Rotor angle [deg]")
    ax_angle.set_title("Rotor over one layer")

    fig.tight_layout()
    plt.show()

    print("\n=== Visualization Example Complete ===")


if __name__ == "__main__":
    main()

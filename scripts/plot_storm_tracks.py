#!/usr/bin/env python3
"""
Plot simulated storm tracks.

Runs a seeded scenario with one hurricane and one supercell, then draws
every entity's track, the hurricane's projected path with its
uncertainty circles, and the world objects.
"""

import sys
import os
import argparse

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle

from StormSim import EntityManager, EntityKind, WorldObject

KIND_COLORS = {
    EntityKind.HURRICANE: 'tab:blue',
    EntityKind.SUPERCELL: 'tab:green',
    EntityKind.TORNADO: 'tab:red',
}


def run_scenario(steps, dt, seed):
    """
    Run the scenario and collect tracks.

    Returns:
        Tuple of (tracks, hurricane, towns) where tracks maps
        entity id -> (kind, Nx2 array of positions)
    """
    towns = [WorldObject(float(x), float(y), name=f"town-{i}")
             for i, (x, y) in enumerate(np.random.default_rng(seed).uniform(-500, 4000, size=(8, 2)))]

    manager = EntityManager(seed=seed)
    hurricane = manager.get(manager.spawn({"kind": "hurricane", "x": 0, "y": 0, "duration": steps * dt + 1}))
    manager.spawn({"kind": "supercell", "x": 500, "y": 2500, "duration": steps * dt})

    environment = {
        "sea_surface_temperature": 28.5,
        "wind_shear": 15.0,
        "steering_u": 6.0,
        "steering_v": 2.0,
    }

    tracks = {}
    for _ in range(steps):
        manager.tick(dt, towns, environment)
        for entity in manager.active_entities():
            kind, points = tracks.setdefault(entity.entity_id, (entity.kind, []))
            points.append(entity.position)

    return {k: (kind, np.array(points)) for k, (kind, points) in tracks.items()}, hurricane, towns


def plot_tracks(tracks, hurricane, towns, output_path=None):
    """Draw entity tracks, projected hurricane path and towns."""
    fig, ax = plt.subplots(figsize=(10, 10))

    for entity_id, (kind, points) in tracks.items():
        color = KIND_COLORS[kind]
        width = 2.0 if kind != EntityKind.TORNADO else 1.0
        ax.plot(points[:, 0], points[:, 1], color=color, linewidth=width, alpha=0.8)
        ax.plot(points[-1, 0], points[-1, 1], 'o', color=color, markersize=4)

    if hurricane.path:
        path = np.array([w.position for w in hurricane.path])
        ax.plot(path[:, 0], path[:, 1], '--', color=KIND_COLORS[EntityKind.HURRICANE], alpha=0.6)
        for waypoint in hurricane.path:
            ax.add_patch(Circle(waypoint.position, waypoint.sigma, fill=False,
                                color=KIND_COLORS[EntityKind.HURRICANE], alpha=0.3))

    town_xy = np.array([(t.x, t.y) for t in towns])
    ax.scatter(town_xy[:, 0], town_xy[:, 1], marker='s', color='black', s=25, label='Towns')

    for kind, color in KIND_COLORS.items():
        ax.plot([], [], color=color, label=kind.value.capitalize())

    ax.set_aspect('equal')
    ax.set_title('Simulated Storm Tracks')
    ax.set_xlabel('X [m]')
    ax.set_ylabel('Y [m]')
    ax.grid(True, linestyle='--', alpha=0.5)
    ax.legend(loc='upper left')

    if output_path:
        fig.savefig(output_path, dpi=150)
        print(f"Plot saved to {output_path}")
    else:
        plt.show()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Plot tracks from a seeded StormSim scenario.")
    parser.add_argument("--steps", type=int, default=200, help="Number of ticks to run.")
    parser.add_argument("--dt", type=float, default=5.0, help="Seconds per tick.")
    parser.add_argument("--seed", type=int, default=3, help="Scenario seed.")
    parser.add_argument("--output", help="Optional path to save the generated plot.")
    args = parser.parse_args()

    print(f"Running {args.steps} ticks of {args.dt}s (seed={args.seed})...")
    tracks, hurricane, towns = run_scenario(args.steps, args.dt, args.seed)
    counts = {}
    for kind, _ in tracks.values():
        counts[kind.value] = counts.get(kind.value, 0) + 1
    print(f"Tracked entities: {counts}")
    plot_tracks(tracks, hurricane, towns, args.output)

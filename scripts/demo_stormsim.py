#!/usr/bin/env python3
"""
StormSim Demo Script

Demonstrates the complete StormSim pipeline with synthetic data:
1. Procedural spawning (seeded)
2. Hurricane intensification, landfall and projected path
3. Tornado random walk and decay
4. Supercell evolution and tornado spawning
5. Impact assessment against world objects
"""

import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import logging

from StormSim import (
    EntityManager,
    RandomGenerator,
    WorldObject,
    assess_impact,
    create_simulator,
)


def print_section(title: str):
    """Print a formatted section header."""
    print(f"\n{'='*60}")
    print(f"  {title}")
    print('='*60)


def print_entity(entity):
    """Print a one-line entity summary."""
    print(f"  {entity.entity_id:<24} pos=({entity.x:8.1f}, {entity.y:8.1f}) "
          f"intensity={entity.intensity:6.1f} radius={entity.radius:6.1f} "
          f"t={entity.elapsed_time:.0f}/{entity.duration:.0f}s")


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print_section("StormSim Demo - Synthetic Severe Weather Scenario")

    world = {"width": 5000, "height": 5000}
    towns = [
        WorldObject(1000, 1000, name="Ashford"),
        WorldObject(2500, 2600, name="Brookville"),
        WorldObject(4000, 800, name="Cedar Point"),
    ]

    # =========================================================================
    # Step 1: Procedural Spawning
    # =========================================================================
    print_section("Step 1: Procedural Spawning")

    generator = RandomGenerator(seed=2024)
    for kind in ("tornado", "supercell", "hurricane"):
        config = generator.generate_random(world, kind, seed=42)
        print(f"  {kind:<10} x={config.x:7.1f} y={config.y:7.1f} "
              f"intensity={config.intensity:6.1f} radius={config.radius:6.1f} duration={config.duration:5.1f}")

    first = generator.generate_random(world, "tornado", seed=42)
    second = generator.generate_random(world, "tornado", seed=42)
    print(f"\n  Same seed again -> identical: {first == second}")

    # =========================================================================
    # Step 2: Hurricane
    # =========================================================================
    print_section("Step 2: Hurricane Intensification and Landfall")

    manager = EntityManager(seed=7)
    hurricane = manager.get(manager.spawn({"kind": "hurricane", "x": 0, "y": 0, "duration": 600}))
    ocean = {"sea_surface_temperature": 29.0, "wind_shear": 5.0, "steering_u": 4.0, "steering_v": 1.5}
    land = dict(ocean, landfall=True)

    for step in range(1, 11):
        environment = ocean if step <= 5 else land
        manager.tick(30.0, towns, environment)
        print(f"  t={manager.elapsed:5.0f}s wind={hurricane.intensity:6.1f} mph "
              f"category={hurricane.category} pressure={hurricane.pressure_center:7.1f} hPa "
              f"landfall={hurricane.landfall}")

    print("\n  Projected path:")
    for waypoint in hurricane.path:
        print(f"    t={waypoint.timestamp:6.0f}s ({waypoint.x:8.1f}, {waypoint.y:8.1f}) ±{waypoint.sigma:.1f}")

    # =========================================================================
    # Step 3: Tornado
    # =========================================================================
    print_section("Step 3: Tornado Random Walk")

    tornado_id = manager.spawn({"kind": "tornado", "x": 1000, "y": 1000, "duration": 40})
    tornado = manager.get(tornado_id)
    while tornado_id in manager:
        report = manager.tick(5.0, towns)
        print_entity(tornado)
        if tornado_id in report.affected:
            names = ", ".join(obj.name for obj in report.affected[tornado_id])
            print(f"    -> impacting: {names}")
    print(f"  {tornado_id} status: {tornado.status.value}")

    # =========================================================================
    # Step 4: Supercell Simulator
    # =========================================================================
    print_section("Step 4: Supercell Simulation")

    simulator = create_simulator({
        "simulation_duration": 120,
        "seed": 11,
        "position": (2000.0, 2000.0),
        "initial_state": {"temperature": 302.0, "humidity": 0.75},
    })
    result = simulator.run(environment={"steering_u": 8.0, "steering_v": 3.0, "wind_shear": 25.0},
                           world_objects=towns)
    final = result.final_state
    print(f"  Steps run: {result.steps}")
    print(f"  Final updraft:  {final.updraft:.2f} m/s")
    print(f"  Final rotation: {final.rotation:.3f}")
    print(f"  Tornadoes spawned: {len(result.tornadoes)}")
    for tornado_id in result.tornadoes:
        print(f"    {tornado_id}")
    print(f"  Peak affected towns in one step: {max(result.affected_counts, default=0)}")

    # =========================================================================
    # Step 5: Impact Assessment
    # =========================================================================
    print_section("Step 5: Impact Assessment")

    for entity in manager.active_entities():
        assessment = assess_impact(entity, towns)
        if not assessment.impacts:
            print(f"  {entity.entity_id}: no towns affected")
            continue
        print(f"  {entity.entity_id}: max severity {assessment.max_severity:.2f}")
        for impact in assessment.impacts:
            print(f"    {impact.obj.name:<12} distance={impact.distance:7.1f} severity={impact.severity:.2f}")

    print_section("Demo Complete")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Run the default Newton's cannon scene headless.

Advances the Earth, the Moon, the satellites and the Moon asteroid, then
prints the state of every entity and the altitude band it stayed in.

Usage:
    python scripts/run_default_world.py --duration 86400 --step 10
    python scripts/run_default_world.py --frames 600 --time-acceleration 1000
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from newtons_cannon.config import SimulationConfig, TimeControl
from newtons_cannon.constants import scale_to_km
from newtons_cannon.scenarios import create_default_world
from newtons_cannon.simulation import Simulation
from newtons_cannon.world import World


def altitudes_km(world: World) -> np.ndarray:
    """Altitude of every entity above its dominant body."""
    values = []
    for entity in world:
        body = world.dominant_body(entity)
        if body is None:
            values.append(np.nan)
            continue
        distance = entity.world_position().distance_to(body.center())
        values.append(scale_to_km(distance - body.radius))
    return np.array(values)


def print_entities(world: World, samples: np.ndarray):
    print(f"\n{'='*86}")
    print(f"T+{world.current_time:.0f}s")
    print(f"{'='*86}")
    print(f"{'Entity':<22} {'Type':<11} {'State':<9} {'Around':<7} "
          f"{'Alt (km)':>10} {'Min':>10} {'Max':>10} {'v (km/s)':>9}")
    print(f"{'-'*86}")

    low = np.nanmin(samples, axis=0)
    high = np.nanmax(samples, axis=0)
    for i, entity in enumerate(world):
        body = world.dominant_body(entity)
        state = "flying" if entity.is_free_falling else "grounded"
        around = body.name if body else "-"
        print(f"{entity.name:<22} {entity.entity_type.value:<11} {state:<9} {around:<7} "
              f"{samples[-1, i]:>10.1f} {low[i]:>10.1f} {high[i]:>10.1f} "
              f"{scale_to_km(entity.velocity.magnitude):>9.3f}")


def main():
    parser = argparse.ArgumentParser(
        description="Run the default Newton's cannon scene",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_default_world.py --duration 86400 --step 10
    python scripts/run_default_world.py --frames 600 --time-acceleration 1000
        """,
    )

    parser.add_argument("--config", help="Simulation config JSON (e.g. data/simulation.json)")
    parser.add_argument("--duration", type=float, default=6000.0,
                        help="Simulated seconds for fixed-step runs (default: 6000)")
    parser.add_argument("--step", type=float, default=1.0,
                        help="Fixed time step in seconds (default: 1)")
    parser.add_argument("--frames", type=int,
                        help="Drive the world with N display frames instead of fixed steps")
    parser.add_argument("--fps", type=float, default=60.0,
                        help="Display frame rate for --frames (default: 60)")
    parser.add_argument("--time-acceleration", type=float, default=100.0,
                        help="Time acceleration for --frames, 1 to 1000 (default: 100)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SimulationConfig.from_json(args.config) if args.config else SimulationConfig()
        world = create_default_world(config)
        samples = [altitudes_km(world)]

        if args.frames:
            simulation = Simulation(world, TimeControl(time_acceleration=args.time_acceleration))
            for _ in range(args.frames):
                simulation.advance(1.0 / args.fps)
                samples.append(altitudes_km(world))
        else:
            if args.step <= 0:
                raise ValueError("Step must be positive")
            while world.current_time < args.duration:
                world.tick(min(args.step, args.duration - world.current_time))
                samples.append(altitudes_km(world))

        print_entities(world, np.vstack(samples))
        return 0

    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

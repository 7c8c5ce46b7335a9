#!/usr/bin/env python3
"""
Fire Newton's cannon from the command line.

Reports flight time, ground range and impact coordinates of one shot, or of
a sweep over barrel elevations.

Usage:
    python scripts/fire_cannon.py --lat 0 --lon 0 --altitude 0 --elevation 45 --speed 1.5 --no-drag
    python scripts/fire_cannon.py --speed 7.9 --elevation 0 --max-time 6000
    python scripts/fire_cannon.py --speed 1.5 --no-drag --sweep 17
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from newtons_cannon.cannon import Cannon, CannonParams
from newtons_cannon.config import SimulationConfig
from newtons_cannon.constants import EARTH_RADIUS_KM
from newtons_cannon.scenarios import create_earth_world
from newtons_cannon.simulation import Simulation


def load_config(args) -> SimulationConfig:
    config = SimulationConfig.from_json(args.config) if args.config else SimulationConfig()
    if args.no_drag:
        config.drag_enabled = False
    if args.no_rotation:
        config.earth_rotation_enabled = False
    return config


def fire_once(params: CannonParams, config: SimulationConfig, step: float, max_time: float):
    """
    Fire one cannonball in a fresh Earth world.

    Returns:
        Tuple of (cannon, ball, world, flight_time)
    """
    world = create_earth_world(config)
    cannon = Cannon(world.get_body("Earth"), params)
    ball = cannon.fire(world)
    flight_time = Simulation(world).run(max_time, step=step,
                                        stop_when=lambda w: ball.has_impacted)
    return cannon, ball, world, flight_time


def ground_range_km(cannon: Cannon, ball) -> float:
    """Great-circle distance from the cannon to the ball (both in the Earth frame)."""
    impact = cannon.body.frame.world_to_local(ball.world_position())
    return cannon.base_position_local().angle_to(impact) * EARTH_RADIUS_KM


def print_shot(params: CannonParams, cannon: Cannon, ball, world, flight_time: float):
    earth = world.get_body("Earth")
    geo = earth.geodetic(ball.world_position())

    print(f"\n{'='*60}")
    print(f"SHOT: {ball.name}")
    print(f"{'='*60}")
    print(f"{'Latitude / longitude':<30} {params.lat:>8.2f} / {params.lon:.2f} deg")
    print(f"{'Cannon altitude':<30} {params.altitude_km:>12.1f} km")
    print(f"{'Azimuth / elevation':<30} {params.azimuth:>8.1f} / {params.elevation:.1f} deg")
    print(f"{'Muzzle speed':<30} {params.speed_kms:>12.3f} km/s")
    print(f"{'-'*47}")

    if ball.has_impacted:
        print(f"{'Flight time':<30} {flight_time:>12.1f} s")
        print(f"{'Ground range':<30} {ground_range_km(cannon, ball):>12.1f} km")
        print(f"{'Impact':<30} {geo}")
    else:
        print(f"Still flying after {flight_time:.0f} s at {geo}")
        print(f"{'Distance from cannon':<30} {ground_range_km(cannon, ball):>12.1f} km")


def print_sweep(params: CannonParams, config: SimulationConfig, step: float,
                max_time: float, count: int, low: float, high: float):
    elevations = np.linspace(low, high, count)
    ranges = np.full(count, np.nan)
    times = np.full(count, np.nan)

    print(f"\n{'Elevation (deg)':>16} {'Flight time (s)':>16} {'Range (km)':>12}")
    print(f"{'-'*46}")
    for i, elevation in enumerate(elevations):
        shot_params = CannonParams(
            lat=params.lat, lon=params.lon, altitude_km=params.altitude_km,
            azimuth=params.azimuth, elevation=float(elevation), speed_kms=params.speed_kms,
        )
        cannon, ball, _, flight_time = fire_once(shot_params, config, step, max_time)
        if ball.has_impacted:
            times[i] = flight_time
            ranges[i] = ground_range_km(cannon, ball)
            print(f"{elevation:>16.1f} {flight_time:>16.1f} {ranges[i]:>12.1f}")
        else:
            print(f"{elevation:>16.1f} {'in flight':>16} {'-':>12}")

    if np.all(np.isnan(ranges)):
        print("\nNo shot landed")
        return
    best = int(np.nanargmax(ranges))
    print(f"\nLongest range: {ranges[best]:.1f} km at {elevations[best]:.1f} deg "
          f"({times[best]:.0f} s of flight)")


def main():
    parser = argparse.ArgumentParser(
        description="Fire Newton's cannon and report where the ball lands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/fire_cannon.py --lat 0 --lon 0 --altitude 0 --elevation 45 --speed 1.5 --no-drag
    python scripts/fire_cannon.py --speed 1.5 --no-drag --sweep 17
        """,
    )

    # Cannon settings
    parser.add_argument("--lat", type=float, default=43.53, help="Latitude (default: 43.53)")
    parser.add_argument("--lon", type=float, default=6.89, help="Longitude (default: 6.89)")
    parser.add_argument("--altitude", type=float, default=100.0,
                        help="Cannon altitude in km (default: 100)")
    parser.add_argument("--azimuth", type=float, default=0.0,
                        help="Azimuth, clockwise from north, in degrees (default: 0)")
    parser.add_argument("--elevation", type=float, default=45.0,
                        help="Barrel elevation in degrees (default: 45)")
    parser.add_argument("--speed", type=float, default=4.0,
                        help="Muzzle speed in km/s (default: 4)")

    # Simulation settings
    parser.add_argument("--config", help="Simulation config JSON (e.g. data/simulation.json)")
    parser.add_argument("--no-drag", action="store_true", help="Disable atmospheric drag")
    parser.add_argument("--no-rotation", action="store_true", help="Disable Earth rotation")
    parser.add_argument("--step", type=float, default=0.1,
                        help="Integration step in seconds (default: 0.1)")
    parser.add_argument("--max-time", type=float, default=3600.0,
                        help="Give up after this many simulated seconds (default: 3600)")

    # Sweep
    parser.add_argument("--sweep", type=int, metavar="N",
                        help="Fire N shots with elevations spread over --sweep-range")
    parser.add_argument("--sweep-range", type=float, nargs=2, default=[5.0, 85.0],
                        metavar=("LOW", "HIGH"), help="Elevation range of the sweep (default: 5 85)")

    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args)
        params = CannonParams(
            lat=args.lat, lon=args.lon, altitude_km=args.altitude,
            azimuth=args.azimuth, elevation=args.elevation, speed_kms=args.speed,
        )

        if args.sweep:
            print_sweep(params, config, args.step, args.max_time,
                        args.sweep, args.sweep_range[0], args.sweep_range[1])
        else:
            cannon, ball, world, flight_time = fire_once(params, config, args.step, args.max_time)
            print_shot(params, cannon, ball, world, flight_time)
        return 0

    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

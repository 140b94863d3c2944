# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface: headless solar-system and satellite snapshot.

Usage:
    # Satellites from a TLE file at a given time, focused on Earth
    orrery --tle stations.tle --time 2024-03-20T12:00:00Z

    # Live data from CelesTrak (requires network)
    orrery --live-group STATIONS --output snapshot.json

    # Step the clock forward 10 x time_step_s, then sample a trajectory
    orrery --tle stations.tle --steps 10 --trajectory 0 --focus moon
"""
import argparse
import logging
import sys
from datetime import datetime

from orrery.adapters.celestrak import CelesTrakTleSource
from orrery.adapters.json_io import load_config, write_snapshot
from orrery.adapters.propagation_worker import (
    SequentialPropagationWorker,
    ThreadedPropagationWorker,
)
from orrery.adapters.sgp4_propagator import Sgp4Propagator
from orrery.adapters.tle_file import read_tle_file
from orrery.domain.config import SimulationConfig
from orrery.domain.epochs import parse_time_iso
from orrery.domain.errors import OrreryError
from orrery.domain.simulation import Simulation
from orrery.domain.tracked_objects import TrackedObjectRecord


def run(
    records: list[TrackedObjectRecord],
    config: SimulationConfig | None = None,
    start_time: datetime | None = None,
    focus: str | None = None,
    steps: int = 0,
    trajectory_index: int | None = None,
    sequential: bool = False,
    propagator=None,
) -> dict:
    """
    Run a headless session and return its final snapshot.

    Positions are requested at ``start_time``, the clock is stepped
    ``steps`` times, and every batch is drained before the next step.
    """
    config = config or SimulationConfig()
    propagator = propagator or Sgp4Propagator()
    if sequential:
        worker = SequentialPropagationWorker(propagator)
    else:
        worker = ThreadedPropagationWorker(
            propagator,
            max_workers=config.worker_threads,
            queue_size=config.request_queue_size,
        )

    with worker:
        sim = Simulation(records, worker, config=config, start_time=start_time)
        if focus:
            sim.set_focus(focus)
        sim.start()
        worker.wait_idle()
        sim.process_replies()
        for _ in range(steps):
            sim.step_time(1)
            worker.wait_idle()
            sim.process_replies()
        if trajectory_index is not None:
            sim.select(trajectory_index)
            worker.wait_idle()
            sim.process_replies()
        return sim.snapshot()


def _print_summary(snapshot: dict) -> None:
    objects = snapshot["objects"]
    print(f"Time:  {snapshot['time']}")
    print(f"Focus: {snapshot['focus']}")
    print(f"Objects positioned: {objects['valid']}/{objects['total']}")
    for name, position in snapshot["bodies"].items():
        x, y, z = position
        print(f"  {name:<8} {x:16.4f} {y:16.4f} {z:16.4f}")
    for slot, points in snapshot["trajectories"].items():
        print(f"Trajectory ({slot}): {len(points)} points")


def main():
    parser = argparse.ArgumentParser(
        description="Compute solar-system and satellite positions for a scene snapshot"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--tle', help="Path to a TLE file (2-line or 3-line format)")
    source.add_argument(
        '--live-group',
        help="CelesTrak group (e.g. STATIONS, GPS-OPS, STARLINK, ONEWEB, ACTIVE)"
    )
    parser.add_argument(
        '--time',
        help="Simulation start time, ISO-8601 (default: now, UTC)"
    )
    parser.add_argument('--focus', help="Body to center the scene on (default: from config)")
    parser.add_argument(
        '--steps', type=int, default=0,
        help="Number of forward time steps to run (default: 0)"
    )
    parser.add_argument(
        '--trajectory', type=int,
        help="Index of an object whose trajectory to sample"
    )
    parser.add_argument('--config', help="Path to a JSON configuration file")
    parser.add_argument(
        '--sequential', action='store_true', default=False,
        help="Propagate on the main thread instead of the worker pool"
    )
    parser.add_argument('--output', '-o', help="Write the snapshot as JSON to this path")
    parser.add_argument(
        '--log-level', default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help="Logging level (default: WARNING)"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.steps < 0:
        parser.error("--steps must be >= 0")

    try:
        config = load_config(args.config) if args.config else SimulationConfig()
        start_time = parse_time_iso(args.time) if args.time else None
        if args.tle:
            records = read_tle_file(args.tle)
        else:
            print(f"Fetching live data from CelesTrak ({args.live_group})...")
            records = CelesTrakTleSource().fetch_group(args.live_group)
            print(f"Received {len(records)} objects")

        snapshot = run(
            records,
            config=config,
            start_time=start_time,
            focus=args.focus,
            steps=args.steps,
            trajectory_index=args.trajectory,
            sequential=args.sequential,
        )
        _print_summary(snapshot)

        if args.output:
            write_snapshot(args.output, snapshot)
            print(f"Wrote snapshot to {args.output}")

    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, ConnectionError, ImportError, IndexError, OrreryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

import argparse
import logging
import pathlib
import sys

# Ensure repository root is on PYTHONPATH when running without installation.
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from airspace.config import SimulationConfig, load_config
from airspace.core.clock import ImmediateTickSource, IntervalTickSource, SimulationClock
from airspace.core.metrics import resolution_count, separation_violations, status_counts, total_negotiations
from airspace.core.simulator import Simulator
from airspace.errors import AirspaceError
from airspace.viz.logger import SwarmLogger, tick_events


def print_summary(state):
    counts = status_counts(state)
    parts = " | ".join(f"{s.value}: {n}" for s, n in counts.items())
    print(
        f"tick {state.tick:5d}  {parts}  "
        f"negotiations: {total_negotiations(state)}  resolutions: {resolution_count(state)}  "
        f"violations: {separation_violations(state)}"
    )


def main():
    parser = argparse.ArgumentParser(description="Run the airspace negotiation simulation headless.")
    parser.add_argument("--config", type=pathlib.Path, help="Path to YAML config.")
    parser.add_argument("--steps", type=int, default=200, help="Number of ticks to run.")
    parser.add_argument("--seed", type=int, help="Override RNG seed.")
    parser.add_argument("--agents", type=int, dest="agent_count", help="Override agent count.")
    parser.add_argument("--realtime", action="store_true", help="Tick at the configured wall-clock interval.")
    parser.add_argument("--log", type=pathlib.Path, help="Optional path to write JSON log.")
    parser.add_argument("--summary-every", type=int, default=50, help="Print a status summary every N ticks.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging (every conflict).")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config)
        if args.seed is not None:
            cfg["seed"] = args.seed
        if args.agent_count is not None:
            cfg["agent_count"] = args.agent_count
        config = SimulationConfig.from_dict(cfg)
    except AirspaceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    sim = Simulator(config)
    source = IntervalTickSource(config.tick_interval) if args.realtime else ImmediateTickSource()
    clock = SimulationClock(sim, tick_source=source)
    logger = SwarmLogger(args.log, include_events=True) if args.log else None

    def on_tick(state):
        for event in tick_events(state):
            print(f"[{event.tick:5d}] {event.type.value:<20} {event.description}")
        if logger:
            logger.log_state(state)
        if args.summary_every and state.tick % args.summary_every == 0:
            print_summary(state)

    try:
        clock.run(max_ticks=args.steps, on_tick=on_tick)
    except KeyboardInterrupt:
        clock.pause()

    print_summary(clock.snapshot())
    if logger:
        logger.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())

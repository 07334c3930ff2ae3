"""
Main entry point for the flocking simulation.

Run with:
    python -m skyflock.main                          # Interactive simulation
    python -m skyflock.main --headless --frames 3000 # Headless run
    python -m skyflock.main --headless --trials 5 --export --plot
"""

import json
import logging
import os
import sys
from typing import List, Optional


def set_headless():
    """Enable headless mode (no window) for batch runs."""
    os.environ["SDL_VIDEODRIVER"] = "dummy"


def run_interactive(config, params):
    """Run the interactive simulation with GUI."""
    from .simulation.interactive import Simulation

    print("=" * 60)
    print("Flocking over Terrain")
    print("=" * 60)
    print("\nControls:")
    print("  ESC    - Quit")
    print("  Arrows - Orbit camera")
    print("  Q/A    - Separation weight up/down")
    print("  W/S    - Alignment weight up/down")
    print("  E/D    - Cohesion weight up/down")
    print("  R/F    - Separation radius up/down")
    print("  T/G    - Alignment radius up/down")
    print("  Y/H    - Cohesion radius up/down")
    print("  V      - Toggle Bird View (follow a boid)")
    print("  N      - Follow the next boid")
    print("  B      - Toggle double-buffered rule evaluation")
    print("  L      - Toggle floor lift before/after integration")
    print("  SPACE  - Save stats to JSON")
    print("\nStarting simulation...")

    sim = Simulation(config, params)
    sim.run()


def run_headless(config, params, frames: int = 3000, trials: int = 1,
                 export: bool = False, plot: bool = False) -> List[dict]:
    """
    Run one or more headless trials and report the results.

    Args:
        config: Simulation configuration; trial k uses seed config.seed + k
        params: Flocking params
        frames: Duration in frames per trial
        trials: Number of trials
        export: Whether to write CSV/JSON results
        plot: Whether to write plots

    Returns:
        List of per-trial result dictionaries
    """
    set_headless()

    from .core.config import SimulationConfig
    from .simulation.headless import HeadlessSimulation
    from .analysis.export import (
        export_results_to_csv, export_timeseries_to_csv,
        export_run_report, calculate_aggregate_stats,
    )

    print("=" * 60)
    print("HEADLESS FLOCK RUN")
    print("=" * 60)
    print(f"Boids: {config.boidCount}")
    print(f"Duration per trial: {frames} frames")
    print(f"Trials: {trials}")
    print()

    base_seed = config.seed if config.seed is not None else 42
    results = []
    for trial in range(trials):
        print(f"\nTrial {trial + 1}/{trials}")
        trial_config = SimulationConfig.from_dict(config.to_dict())
        trial_config.seed = base_seed + trial

        sim = HeadlessSimulation(trial_config, params)
        result = sim.run(frames)
        result["trial"] = trial + 1
        results.append(result)

    aggregates = calculate_aggregate_stats(results)

    print("\n" + "=" * 60)
    print("RUN SUMMARY")
    print("=" * 60)
    print(f"   Cohesion: {aggregates.get('avg_cohesion_mean', 0):.2f} "
          f"+/- {aggregates.get('avg_cohesion_std', 0):.2f}")
    print(f"   Speed: {aggregates.get('avg_speed_mean', 0):.2f}")
    print(f"   Clearance: {aggregates.get('avg_clearance_mean', 0):.2f} "
          f"(min {min(r['min_clearance'] for r in results):.2f})")
    print(f"   Floor lifts: {aggregates.get('total_floor_lifts_mean', 0):.0f}")
    print(f"   Wraps: {aggregates.get('total_wraps_mean', 0):.0f}")

    if export:
        export_run_report({
            "config": config.to_dict(),
            "params": params.to_dict(),
            "trial_results": results,
            "aggregates": aggregates,
        })
        export_results_to_csv(results)
        export_timeseries_to_csv(results[0])

    if plot:
        from .analysis.plotting import plot_timeseries, plot_trial_comparison

        print("\nGenerating plots...")
        plot_timeseries(results[0])
        if len(results) > 1:
            plot_trial_comparison(results)

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    from .core.config import FlockingParams, SimulationConfig, load_config

    parser = argparse.ArgumentParser(description="Terrain-aware 3D Flocking Simulation")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--frames", type=int, default=3000, help="Duration in frames per headless trial")
    parser.add_argument("--trials", type=int, default=1, help="Number of headless trials")
    parser.add_argument("--boids", type=int, default=None, help="Override the boid count")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for spawning")
    parser.add_argument("--config", type=str, default=None, help="JSON config file")
    parser.add_argument("--export", action="store_true", help="Write CSV/JSON results")
    parser.add_argument("--plot", action="store_true", help="Write result plots")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        if args.config:
            config, params = load_config(args.config)
        else:
            config, params = SimulationConfig(), FlockingParams()

        if args.boids is not None:
            config.boidCount = args.boids
        if args.seed is not None:
            config.seed = args.seed
        config.validate()
        if args.trials < 1:
            raise ValueError(f"--trials must be >= 1, got {args.trials}")
        if args.frames < 0:
            raise ValueError(f"--frames must be >= 0, got {args.frames}")
    except (OSError, json.JSONDecodeError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 2

    if args.headless:
        run_headless(config, params, frames=args.frames, trials=args.trials,
                     export=args.export, plot=args.plot)
    else:
        run_interactive(config, params)
    return 0


if __name__ == "__main__":
    sys.exit(main())

# main.py
"""
Main entry point for the Particle Bounce visualization.

This script orchestrates the entire lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the simulation context, the boundary shapes and the first batch.
4. Runs the frame loop: one simulation tick and one redraw per frame.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config, parse_int
import cProfile
import pstats
import io

def main():
    """
    The main function to run the visualization.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Bounce Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from context import SimulationContext
    from simulation import Simulation
    from visualization import Visualizer

    # --- Component Initialization ---
    context = SimulationContext(sim_params)
    sim = Simulation(context)
    visualizer = Visualizer(
        context.canvas_width,
        context.canvas_height,
        colors=vis_params.get('particle_colors'),
        show_control_points=vis_params.get('show_control_points', True),
    )

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = parse_int(run_params.get('log_throttle_steps', 300), 300)
    max_steps = run_params.get('max_steps', 0) # 0 runs until the window is closed

    running = True
    if profiler:
        profiler.enable()
    while running:
        # Paused frames skip the tick entirely; state stays frozen for editing.
        if context.playing:
            sim.step()

            if sim.step_count % log_throttle == 0:
                logging.info(f"Simulation step {sim.step_count} | shape '{context.shape}'")
                logging.debug(
                    f"Step {sim.step_count} | Collisions so far: {sim.collision_count} | "
                    f"Path length: {len(context.particles.paths[0])}"
                )

            if max_steps and sim.step_count >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                running = False

        if not visualizer.draw(context, sim):
            running = False
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info("Frame loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20) # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Bounce Shutting Down ---")


if __name__ == "__main__":
    main()

import asyncio
from datetime import datetime, timezone
import time

from dotenv import load_dotenv
import hydra
from hydra.utils import instantiate
from loguru import logger
from omegaconf import DictConfig

from flappyevo.config.helpers import build_runner
from flappyevo.config.resolvers import register_resolvers
from flappyevo.controllers.base import ControllerFactory
from flappyevo.evolution.config import EvolutionConfig
from flappyevo.runner.driver import DriverConfig, SimulationDriver
from flappyevo.utils.logger_setup import setup_logger
from flappyevo.utils.serve import serve_until_signal
from flappyevo.utils.trackers import GenericLogger, init_tb
from flappyevo.world.config import WorldConfig


async def run_experiment(cfg: DictConfig):
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("FlappyEvo Training Run")
    logger.info("=" * 80)
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")

    writer: GenericLogger | None = None
    driver: SimulationDriver | None = None
    try:
        logger.info("Step 1/3: Initializing components...")
        world: WorldConfig = instantiate(cfg.world)
        evolution: EvolutionConfig = instantiate(cfg.evolution)
        driver_config: DriverConfig = instantiate(cfg.driver)
        factory: ControllerFactory = instantiate(cfg.controller_factory)
        rng = instantiate(cfg.rng)
        if cfg.tracker.enabled:
            writer = init_tb(instantiate(cfg.tracker.config), flush_secs=cfg.tracker.flush_secs)
        logger.info("Step 1/3: Complete")

        logger.info("Step 2/3: Creating initial population...")
        driver = SimulationDriver.from_config(
            driver_config, world, evolution, factory, rng, writer=writer
        )
        runner = build_runner(driver, driver_config)
        logger.info(f"  Population size: {evolution.population_size}")
        logger.info(f"  Elites per generation: {cfg.summary.elites_per_generation}")
        logger.info(f"  Offspring per generation: {cfg.summary.offspring_per_generation}")
        logger.info(f"  Ticks per frame: {driver.ticks_per_frame}")
        max_gens: int | None = driver_config.max_generations
        logger.info(f"  Max generations: {max_gens if max_gens else 'unlimited'}")
        logger.info("Step 2/3: Complete")

        logger.info("Step 3/3: Running until completion or signal...")
        runner.start()
        await serve_until_signal(stop_coros=(runner.stop(),), on_stop=(runner.task,))

    except KeyboardInterrupt:
        logger.info("Training run interrupted by user")
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Training run failed: {e}")
        raise
    finally:
        logger.info("Starting cleanup...")
        if writer is not None:
            writer.close()
        if driver is not None:
            metrics = driver.metrics
            logger.info(
                f"Generations: {metrics.total_generations}, ticks: {metrics.total_ticks}, "
                f"best survival: {metrics.best_ticks_ever}"
            )
        duration = time.time() - start_time
        logger.info(
            f"Total run duration: {duration:.2f} seconds ({duration / 3600:.2f} hours)"
        )
        logger.info(f"End time: {datetime.now(timezone.utc).isoformat()}")
        logger.info("=" * 80)


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    load_dotenv()

    log_file_path = setup_logger(
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
    )
    logger.info(
        "Run working directory: {}.",
        hydra.core.hydra_config.HydraConfig.get().runtime.output_dir,
    )
    logger.info(f"Log file: {log_file_path}")
    asyncio.run(run_experiment(cfg))


if __name__ == "__main__":
    register_resolvers()
    main()

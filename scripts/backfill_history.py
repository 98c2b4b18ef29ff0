import argparse

from econ_pipeline.config.indicators import backfill_indicators
from econ_pipeline.scheduler.jobs import run_full_backfill
from econ_pipeline.utils.logger import logger


def main():
    available = {spec.job_name: spec for spec in backfill_indicators()}

    parser = argparse.ArgumentParser(description="Load full World Bank history (gaps only)")
    parser.add_argument("indicators", nargs="*", help=f"Indicator types (default: all). One of {sorted(available)}")
    args = parser.parse_args()

    unknown = [name for name in args.indicators if name not in available]
    if unknown:
        parser.error(f"cannot backfill {unknown}")

    selected = [available[name] for name in args.indicators] or list(available.values())
    progress = run_full_backfill(indicators=selected)

    logger.info(f"Completed: {progress.completed}")
    if progress.failed:
        for failure in progress.failed:
            logger.error(f"Failed {failure['type']}: {failure['error']}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()

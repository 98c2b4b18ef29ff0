import argparse

from econ_pipeline.config.indicators import list_job_names
from econ_pipeline.scheduler.jobs import build_orchestrator
from econ_pipeline.utils.logger import logger


def main():
    parser = argparse.ArgumentParser(description="Run indicator ingestion once")
    parser.add_argument("jobs", nargs="*", help=f"Job names (default: all). One of {list_job_names()}")
    args = parser.parse_args()

    job_names = args.jobs or list_job_names()
    results = build_orchestrator().run_all(job_names)

    for job_name, result in results.items():
        if result is None:
            logger.error(f"{job_name}: failed")
        else:
            logger.info(
                f"{job_name}: inserted={result.inserted} updated={result.updated} "
                f"skipped={result.skipped} errors={len(result.errors)}"
            )

    if any(r is None for r in results.values()):
        raise SystemExit(1)


if __name__ == "__main__":
    main()

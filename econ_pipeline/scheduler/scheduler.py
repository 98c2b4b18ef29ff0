from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from econ_pipeline.config.indicators import CATALOG
from econ_pipeline.config.settings import settings
from econ_pipeline.scheduler.jobs import run_ingestion_job
from econ_pipeline.utils.logger import logger


def build_scheduler(engine=None, cache=None) -> BlockingScheduler:
    scheduler = BlockingScheduler(timezone=settings.CRON_TZ)

    for spec in CATALOG:
        scheduler.add_job(
            func=run_ingestion_job,
            trigger=CronTrigger.from_crontab(spec.schedule, timezone=settings.CRON_TZ),
            args=[spec.job_name],
            kwargs={"engine": engine, "cache": cache},
            id=f"{spec.job_name}_ingestion",
            name=f"{spec.name} ingestion",
            replace_existing=True,
            # one run per job at a time
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Scheduled: {spec.job_name} ({spec.schedule})")

    return scheduler


def start_scheduler():
    scheduler = build_scheduler()
    logger.info(f"Scheduler started with timezone {settings.CRON_TZ}")

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped gracefully")


if __name__ == "__main__":
    start_scheduler()

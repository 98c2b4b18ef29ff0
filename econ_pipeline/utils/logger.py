from loguru import logger
import sys
from econ_pipeline.config.settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level}</level> | "
    "<cyan>{name}</cyan> | {message}"
)

logger.remove()
logger.add(sys.stdout, level=settings.LOG_LEVEL, format=LOG_FORMAT)

# scheduler and backfill runs are long-lived; keep a rotating file when asked
if settings.LOG_FILE:
    logger.add(
        settings.LOG_FILE,
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention=5,
        enqueue=True,
    )

__all__ = ["logger"]

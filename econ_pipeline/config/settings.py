from dotenv import load_dotenv
import os
from sqlalchemy.engine import URL, make_url


load_dotenv()

class Settings:
    DB_HOST = os.getenv("POSTGRES_HOST", "localhost")
    DB_PORT = int(os.getenv("POSTGRES_PORT", 5432))
    DB_NAME = os.getenv("POSTGRES_DB", "globe")
    DB_USER = os.getenv("POSTGRES_USER")
    DB_PASSWORD = os.getenv("POSTGRES_PASSWORD")
    DATABASE_URL = os.getenv("DATABASE_URL")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE")
    CRON_TZ = os.getenv("CRON_TZ", "UTC")

    WORLD_BANK_BASE_URL = os.getenv("WORLD_BANK_BASE_URL", "https://api.worldbank.org/v2")
    EXCHANGE_RATE_URL = os.getenv("EXCHANGE_RATE_URL", "https://open.er-api.com/v6/latest/USD")
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", 60))
    HTTP_MAX_RETRIES = int(os.getenv("HTTP_MAX_RETRIES", 3))

    WORLD_BANK_PAGE_SIZE = int(os.getenv("WORLD_BANK_PAGE_SIZE", 500))
    BACKFILL_PAGE_SIZE = int(os.getenv("BACKFILL_PAGE_SIZE", 1000))
    BACKFILL_BATCH_SIZE = int(os.getenv("BACKFILL_BATCH_SIZE", 500))
    BACKFILL_PAGE_DELAY = float(os.getenv("BACKFILL_PAGE_DELAY", 0.5))
    BACKFILL_INDICATOR_DELAY = float(os.getenv("BACKFILL_INDICATOR_DELAY", 2.0))

    LEDGER_ERROR_LIMIT = int(os.getenv("LEDGER_ERROR_LIMIT", 5))
    LEDGER_ERROR_MAX_CHARS = int(os.getenv("LEDGER_ERROR_MAX_CHARS", 2000))

    ADMIN_SECRET = os.getenv("ADMIN_SECRET")

    @property
    def database_url(self) -> URL:
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        return URL.create(
            drivername="postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD,   # URL.create handles quoting
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

settings = Settings()

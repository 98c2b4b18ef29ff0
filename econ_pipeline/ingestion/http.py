import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from econ_pipeline.config.settings import settings


def build_session(max_retries: int | None = None) -> requests.Session:
    """Session retrying transient transport errors. Payload problems are not retried."""
    retry = Retry(
        total=settings.HTTP_MAX_RETRIES if max_retries is None else max_retries,
        backoff_factor=2,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session

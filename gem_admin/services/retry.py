import logging
import time
from typing import Callable, Optional, TypeVar

from gem_admin.utils.api_client import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def load_with_retry(
    load: Callable[[], T],
    attempts: int = 2,
    delay: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    label: Optional[str] = None,
) -> T:
    """Run ``load``, retrying up to ``attempts`` extra times on transient failures.

    Only network errors and 5xx responses are retried; the wait grows with
    each attempt (``delay * attempt``). Any other error is raised at once.
    """
    label = label or getattr(load, "__name__", "load")
    attempt = 0
    while True:
        try:
            return load()
        except ApiError as e:
            if not e.transient or attempt >= attempts:
                raise
            attempt += 1
            wait = delay * attempt
            logger.warning("%s failed (%s); retry %d/%d in %.1fs", label, e.message, attempt, attempts, wait)
            sleep(wait)

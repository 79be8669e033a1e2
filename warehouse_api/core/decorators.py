import functools
import logging

logger = logging.getLogger(__name__)


def best_effort(func):
    """Run a side-effect method; log and swallow any failure it raises."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.warning("%s failed, continuing", func.__qualname__, exc_info=True)
            return None

    return wrapper


__all__ = ["best_effort"]

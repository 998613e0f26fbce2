"""
Shared plumbing for the console scripts.
"""
import os
import logging
from typing import Callable, Optional, Tuple

from airspace_nil.config import ConfigStore, NilConfig
from airspace_nil.exceptions import AirSpaceError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once; level from AIRSPACE_LOG_LEVEL (default INFO)."""
    level = (level or os.environ.get("AIRSPACE_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def load_config(path: Optional[str] = None) -> Tuple[ConfigStore, NilConfig]:
    store = ConfigStore(path)
    return store, NilConfig.from_store(store)


def run(command: Callable[[], None]) -> int:
    """
    Run a script body and map its outcome to an exit code.

    Returns:
        0 on graceful completion, 1 on any error
    """
    configure_logging()
    try:
        command()
    except AirSpaceError as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1
    return 0

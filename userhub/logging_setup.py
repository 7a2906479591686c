"""
Logging Setup
"""
import logging

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s :: %(message)s'


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the service process."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    logging.getLogger("userhub").setLevel(getattr(logging, level, logging.INFO))

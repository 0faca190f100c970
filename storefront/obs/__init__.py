from .errors import capture_exception, init_sentry
from .logging import JsonFormatter, configure_logging

__all__ = ["JsonFormatter", "capture_exception", "configure_logging", "init_sentry"]

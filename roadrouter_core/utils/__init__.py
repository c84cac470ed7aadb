"""Utils module - Configuration and logging."""

from roadrouter_core.utils.config import (
    RouterConfig,
    load_config,
)
from roadrouter_core.utils.logging import (
    JSONFormatter,
    configure_from,
    configure_logging,
)

__all__ = [
    "RouterConfig",
    "load_config",
    "JSONFormatter",
    "configure_from",
    "configure_logging",
]

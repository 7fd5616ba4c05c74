from .stats import router as stats_router  # noqa: F401
from .system import router as system_router  # noqa: F401

__all__ = ["stats_router", "system_router"]

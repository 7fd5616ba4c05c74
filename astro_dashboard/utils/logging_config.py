import logging
import sys


def configure_logging(level: str = "INFO"):
    """Configure logging for the application."""
    root = logging.getLogger()
    if any(getattr(h, "_astro_dashboard", False) for h in root.handlers):
        root.setLevel(level.upper())
        return
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    handler.setFormatter(formatter)
    handler._astro_dashboard = True
    root.addHandler(handler)
    root.setLevel(level.upper())

__all__ = ['configure_logging']

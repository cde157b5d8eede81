"""Run configuration and processing context."""

from seamark_sectors.config.settings import ProcessingConfig, ProcessingContext

__all__ = ["ProcessingConfig", "ProcessingContext"]

"""Per-node sector pipeline."""

from seamark_sectors.pipeline.processor import FeatureProcessor, FeatureResult

__all__ = ["FeatureProcessor", "FeatureResult"]

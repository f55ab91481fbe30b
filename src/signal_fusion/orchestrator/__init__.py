"""Pipeline orchestration."""

from signal_fusion.orchestrator.pipeline import MissingPriceDataError, SignalFusion

__all__ = ["MissingPriceDataError", "SignalFusion"]

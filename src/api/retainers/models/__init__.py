"""Retainers models package."""
from src.api.retainers.models.retainer_period import RetainerPeriod

__all__ = ["RetainerPeriod"]

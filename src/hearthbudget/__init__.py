"""HearthBudget: household budget vs. actual variance reporting."""

from __future__ import annotations

from .config import BaseConfig
from .services.variance import VarianceReport, calculate_variance

__all__ = ["BaseConfig", "VarianceReport", "calculate_variance"]

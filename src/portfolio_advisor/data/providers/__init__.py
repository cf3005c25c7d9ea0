"""
Price sources for Portfolio Advisor.

This module provides concrete implementations of PriceSource.
"""

from ..base import PriceSource, StaticPriceSource
from .simulated import SimulatedPriceSource

__all__ = [
    # Base classes
    "PriceSource",
    "StaticPriceSource",

    # Simulated random-walk source
    "SimulatedPriceSource",
]

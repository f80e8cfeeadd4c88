"""
Analytics package exports.
"""

from review_core.analytics.service import build_dashboard
from review_core.analytics.types import DashboardStats

__all__ = [
    "build_dashboard",
    "DashboardStats",
]

"""
Package: scheduling
Description: Server-side cron job management.
"""

from .client import SchedulerClient

__all__ = ["SchedulerClient"]

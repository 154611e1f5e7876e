"""
Package: config
Description: Configuration for the Hookme SDK.
"""

from .settings import HookmeSettings

__all__ = ["HookmeSettings"]

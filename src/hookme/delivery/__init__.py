"""
Package: delivery
Description: Webhook delivery for the Hookme SDK.

Provides the HTTP transport, the single-attempt delivery engine,
the emit and retry loops, and startup reconciliation of stored events.
"""

from .engine import DeliveryEngine
from .loops import EmitLoop, PeriodicTask, RetryLoop
from .queues import EmitQueue, RetrySet
from .reconciler import StartupReconciler
from .tracker import InFlightTracker
from .transport import PushTransport, Transport, TransportResponse

__all__ = [
    "DeliveryEngine",
    "EmitLoop",
    "EmitQueue",
    "InFlightTracker",
    "PeriodicTask",
    "PushTransport",
    "RetryLoop",
    "RetrySet",
    "StartupReconciler",
    "Transport",
    "TransportResponse",
]

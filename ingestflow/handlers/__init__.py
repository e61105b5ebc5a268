"""Message handler variants.

A handler owns one message for one ``process()`` call.  Typed handlers run
their kind's rule chain; the unknown handler saves straight to the unknown
sink.  Both share the complete/abandon contract in ``MessageHandler``.
"""

from ingestflow.handlers.base import (
    HandlerReuseError,
    MessageHandler,
    UnsupportedOperationError,
)
from ingestflow.handlers.context import HandlerContext
from ingestflow.handlers.member_event import MemberEventHandler
from ingestflow.handlers.unknown import UnknownMessageHandler

__all__ = [
    "HandlerContext",
    "HandlerReuseError",
    "MemberEventHandler",
    "MessageHandler",
    "UnknownMessageHandler",
    "UnsupportedOperationError",
]

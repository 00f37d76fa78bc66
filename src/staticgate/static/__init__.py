"""
=============================================================================
STATIC FILE GATE
=============================================================================

    resolver.py   decode, index substitution, containment (pure, no I/O)
    hidden.py     dot-file filter (pure, no I/O)
    delivery.py   DeliveryAdapter + FileSender (the only part that reads disk)
    gate.py       StaticGate middleware tying it together, serve() factory

=============================================================================
"""

from .delivery import Delivery, DeliveryAdapter, FileSender, SendOptions, Sender
from .gate import GateResult, Outcome, StaticGate, serve
from .hidden import is_hidden
from .resolver import apply_index, decode_path, is_contained, resolve_path, strip_path_root

__all__ = [
    "StaticGate",
    "GateResult",
    "Outcome",
    "serve",
    "Delivery",
    "DeliveryAdapter",
    "FileSender",
    "SendOptions",
    "Sender",
    "is_hidden",
    "apply_index",
    "decode_path",
    "is_contained",
    "resolve_path",
    "strip_path_root",
]

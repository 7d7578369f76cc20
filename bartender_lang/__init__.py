from .grammar import ORDER_GRAMMAR, PEG_NOTATION
from .exceptions import BartenderError, GrammarError, NotUnderstood
from .interfaces import IOHandler, ConsoleIO
from .models import Order, Vessel, Vocabulary
from .loader import load_grammar
from .recognizer import (
    Recognizer,
    default_recognizer,
    normalize_description,
    parse_order,
)

__all__ = [
    "ORDER_GRAMMAR",
    "PEG_NOTATION",
    "BartenderError",
    "GrammarError",
    "NotUnderstood",
    "IOHandler",
    "ConsoleIO",
    "Order",
    "Vessel",
    "Vocabulary",
    "load_grammar",
    "Recognizer",
    "default_recognizer",
    "normalize_description",
    "parse_order",
]

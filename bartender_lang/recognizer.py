import logging
import re
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from . import engine
from .exceptions import GrammarError, NotUnderstood
from .grammar import ORDER_GRAMMAR
from .loader import ActionFunc, load_grammar
from .models import Order, Vessel, Vocabulary

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_description(text: str) -> str:
    """Trim, collapse whitespace runs to a single space and lowercase."""
    return _WHITESPACE.sub(" ", text.strip()).lower()


def set_vessel(captured: str) -> Dict[str, Any]:
    return {"vessel": Vessel.from_word(captured)}


def set_description(captured: str) -> Dict[str, Any]:
    return {"description": normalize_description(captured)}


def set_terminal(captured: str) -> Dict[str, Any]:
    return {"terminal": True}


ORDER_ACTIONS: Mapping[str, ActionFunc] = {
    "set_vessel": set_vessel,
    "set_description": set_description,
    "set_terminal": set_terminal,
}


class Recognizer:
    """Turns one line of text into an ``Order``.

    The compiled rule table is read-only, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        vocabulary: Optional[Vocabulary] = None,
        grammar: str = ORDER_GRAMMAR,
    ):
        self.vocabulary = vocabulary if vocabulary is not None else Vocabulary.default()
        self.rules = load_grammar(grammar, self.vocabulary.as_tables(), ORDER_ACTIONS)

    def _rule(self, start: str) -> engine.Rule:
        try:
            return self.rules[start]
        except KeyError:
            raise GrammarError(f"No rule named '{start}'") from None

    def _run(self, text: str, start: str) -> Dict[str, Any]:
        m = engine.match_all(self._rule(start), text)
        if m is None:
            logger.debug("Rejected %r at rule '%s'", text, start)
            raise NotUnderstood(text)
        return m.reduce()

    def accepts(self, text: str, start: str = "order") -> bool:
        return engine.match_all(self._rule(start), text) is not None

    def recognize(self, text: str) -> Order:
        fields = self._run(text, "order")
        try:
            return Order(**fields)
        except ValueError:
            # description held nothing but whitespace the grammar does not skip
            logger.debug("Rejected %r: empty description", text)
            raise NotUnderstood(text) from None

    def vessel_of(self, text: str) -> Vessel:
        return self._run(text, "article_vessel")["vessel"]


@lru_cache(maxsize=None)
def default_recognizer() -> Recognizer:
    return Recognizer()


def parse_order(text: str) -> Order:
    return default_recognizer().recognize(text)

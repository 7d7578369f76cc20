import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError, VisitError

from . import engine
from .exceptions import GrammarError
from .grammar import PEG_NOTATION

logger = logging.getLogger(__name__)

ActionFunc = Callable[[str], Mapping[str, Any]]

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "\\": "\\", "]": "]"}


def _unescape(body: str) -> str:
    out = []
    chars = iter(body)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            out.append(_ESCAPES.get(nxt, nxt))
        else:
            out.append(ch)
    return "".join(out)


@v_args(inline=True)
class RuleBuilder(Transformer):
    """Turns a parsed PEG notation tree into engine combinators."""

    def __init__(
        self,
        vocabularies: Mapping[str, Iterable[str]],
        actions: Mapping[str, ActionFunc],
    ):
        super().__init__()
        self.vocabularies = vocabularies
        self.actions = actions
        self.references: Dict[str, List[engine.Reference]] = {}

    def start(self, *rules):
        return list(rules)

    def rule(self, name, body):
        return str(name), body

    def choice(self, *alternatives):
        if len(alternatives) == 1:
            return alternatives[0]
        return engine.first_of(*alternatives)

    def sequence(self, *terms):
        if len(terms) == 1:
            return terms[0]
        return engine.sequence(*terms)

    def test(self, rule):
        return engine.test(rule)

    def test_not(self, rule):
        return engine.test_not(rule)

    def zero_or_more(self, rule):
        return engine.zero_or_more(rule)

    def one_or_more(self, rule):
        return engine.one_or_more(rule)

    def optional(self, rule):
        return engine.optional(rule)

    def literal(self, token):
        raw = str(token)
        if raw.endswith("i"):
            return engine.literal_ci(raw[1:-2])
        return engine.literal(raw[1:-1])

    def any_of(self, token):
        return engine.any_of(_unescape(str(token)[1:-1]))

    def vocabulary(self, name):
        key = str(name)
        if key not in self.vocabularies:
            raise GrammarError(f"Unknown vocabulary '@{key}'")
        return engine.one_of(self.vocabularies[key])

    def action(self, name):
        key = str(name)
        if key not in self.actions:
            raise GrammarError(f"Unknown action '{{{key}}}'")
        return engine.action(key, self.actions[key])

    def capture(self, body):
        return engine.capture(body)

    def any_char(self):
        return engine.ANY

    def end_of_input(self):
        return engine.EOI

    def reference(self, name):
        ref = engine.Reference(str(name))
        self.references.setdefault(ref.name, []).append(ref)
        return ref


def load_grammar(
    source: str,
    vocabularies: Mapping[str, Iterable[str]],
    actions: Mapping[str, ActionFunc],
) -> Dict[str, engine.Rule]:
    """Compile PEG notation into a table of named engine rules."""
    builder = RuleBuilder(vocabularies, actions)
    try:
        tree = Lark(PEG_NOTATION, parser="lalr").parse(source)
        definitions = builder.transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, GrammarError):
            raise e.orig_exc from None
        raise GrammarError(f"Malformed grammar: {e.orig_exc}") from e
    except LarkError as e:
        raise GrammarError(f"Malformed grammar: {e}") from e

    table: Dict[str, engine.Rule] = {}
    for name, body in definitions:
        if name in table:
            raise GrammarError(f"Rule '{name}' is defined twice")
        table[name] = body

    for name, refs in builder.references.items():
        if name not in table:
            raise GrammarError(f"Rule '{name}' is referenced but not defined")
        for ref in refs:
            ref.bind(table[name])

    logger.debug("Compiled grammar with rules: %s", ", ".join(table))
    return table

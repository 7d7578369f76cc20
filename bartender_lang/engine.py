"""Ordered-choice (PEG) matcher over a plain string.

Rules are immutable and carry no per-call state, so one rule graph may be
shared by any number of concurrent callers. ``Rule.match(text, pos)`` returns
a ``Match`` on success and ``None`` on failure. A failed rule never consumes
input: every combinator works from the position it was handed, so restoring
the cursor on backtrack is simply a matter of not advancing it.

Semantic actions are not run while matching. They are recorded as effects on
the ``Match`` and only replayed by ``Match.reduce`` once the whole parse has
succeeded, which means an action reached inside a branch that later backtracks
never runs at all.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from .exceptions import GrammarError


@dataclass(frozen=True)
class Captured:
    text: str


@dataclass(frozen=True)
class Deferred:
    name: str
    func: Callable[[str], Mapping[str, Any]]


Effect = Union[Captured, Deferred]


@dataclass(frozen=True)
class Match:
    end: int
    effects: Tuple[Effect, ...] = ()

    def reduce(self, initial: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Replay recorded actions left to right and fold their updates.

        Each action receives the text of the most recent capture preceding it.
        """
        fields: Dict[str, Any] = dict(initial or {})
        last_capture = ""
        for effect in self.effects:
            if isinstance(effect, Captured):
                last_capture = effect.text
            else:
                fields.update(effect.func(last_capture))
        return fields


class Rule:
    def match(self, text: str, pos: int) -> Optional[Match]:
        raise NotImplementedError


@dataclass(frozen=True)
class Literal(Rule):
    value: str
    ignore_case: bool = False

    def match(self, text: str, pos: int) -> Optional[Match]:
        end = pos + len(self.value)
        chunk = text[pos:end]
        if self.ignore_case:
            hit = chunk.lower() == self.value.lower()
        else:
            hit = chunk == self.value
        return Match(end) if hit else None


@dataclass(frozen=True)
class AnyOf(Rule):
    chars: str

    def match(self, text: str, pos: int) -> Optional[Match]:
        if pos < len(text) and text[pos] in self.chars:
            return Match(pos + 1)
        return None


@dataclass(frozen=True)
class OneOf(Rule):
    """Longest-match over a word list; ties go to the earlier declaration."""

    alternatives: Tuple[str, ...]
    ignore_case: bool = True

    def __post_init__(self):
        # sorted() is stable, reverse=True included
        ordered = tuple(sorted(self.alternatives, key=len, reverse=True))
        object.__setattr__(self, "_ordered", ordered)

    def match(self, text: str, pos: int) -> Optional[Match]:
        for word in self._ordered:
            end = pos + len(word)
            chunk = text[pos:end]
            if self.ignore_case:
                hit = chunk.lower() == word.lower()
            else:
                hit = chunk == word
            if hit:
                return Match(end)
        return None


@dataclass(frozen=True)
class Sequence(Rule):
    rules: Tuple[Rule, ...]

    def match(self, text: str, pos: int) -> Optional[Match]:
        effects: Tuple[Effect, ...] = ()
        cursor = pos
        for rule in self.rules:
            m = rule.match(text, cursor)
            if m is None:
                return None
            cursor = m.end
            effects += m.effects
        return Match(cursor, effects)


@dataclass(frozen=True)
class FirstOf(Rule):
    rules: Tuple[Rule, ...]

    def match(self, text: str, pos: int) -> Optional[Match]:
        for rule in self.rules:
            m = rule.match(text, pos)
            if m is not None:
                return m
        return None


@dataclass(frozen=True)
class Repeat(Rule):
    rule: Rule
    minimum: int = 0

    def match(self, text: str, pos: int) -> Optional[Match]:
        effects: Tuple[Effect, ...] = ()
        cursor = pos
        count = 0
        while True:
            m = self.rule.match(text, cursor)
            if m is None:
                break
            count += 1
            effects += m.effects
            if m.end == cursor:
                # zero-width success would repeat forever
                break
            cursor = m.end
        if count < self.minimum:
            return None
        return Match(cursor, effects)


@dataclass(frozen=True)
class Optional_(Rule):
    rule: Rule

    def match(self, text: str, pos: int) -> Optional[Match]:
        m = self.rule.match(text, pos)
        return m if m is not None else Match(pos)


@dataclass(frozen=True)
class Lookahead(Rule):
    rule: Rule
    negate: bool = False

    def match(self, text: str, pos: int) -> Optional[Match]:
        hit = self.rule.match(text, pos) is not None
        if hit != self.negate:
            return Match(pos)
        return None


@dataclass(frozen=True)
class AnyChar(Rule):
    def match(self, text: str, pos: int) -> Optional[Match]:
        return Match(pos + 1) if pos < len(text) else None


@dataclass(frozen=True)
class EndOfInput(Rule):
    def match(self, text: str, pos: int) -> Optional[Match]:
        return Match(pos) if pos == len(text) else None


@dataclass(frozen=True)
class Capture(Rule):
    rule: Rule

    def match(self, text: str, pos: int) -> Optional[Match]:
        m = self.rule.match(text, pos)
        if m is None:
            return None
        return Match(m.end, m.effects + (Captured(text[pos:m.end]),))


@dataclass(frozen=True)
class Action(Rule):
    name: str
    func: Callable[[str], Mapping[str, Any]]

    def match(self, text: str, pos: int) -> Optional[Match]:
        return Match(pos, (Deferred(self.name, self.func),))


class Reference(Rule):
    """Named forward reference, bound once the whole rule table exists."""

    def __init__(self, name: str):
        self.name = name
        self.target: Optional[Rule] = None

    def bind(self, target: Rule) -> None:
        self.target = target

    def match(self, text: str, pos: int) -> Optional[Match]:
        if self.target is None:
            raise GrammarError(f"Rule '{self.name}' was referenced but never bound")
        return self.target.match(text, pos)

    def __repr__(self) -> str:
        return f"Reference({self.name!r})"


ANY = AnyChar()
EOI = EndOfInput()


def literal(value: str) -> Rule:
    return Literal(value)


def literal_ci(value: str) -> Rule:
    return Literal(value, ignore_case=True)


def any_of(chars: str) -> Rule:
    return AnyOf(chars)


def one_of(alternatives: Iterable[str], ignore_case: bool = True) -> Rule:
    return OneOf(tuple(alternatives), ignore_case=ignore_case)


def sequence(*rules: Rule) -> Rule:
    return Sequence(tuple(rules))


def first_of(*rules: Rule) -> Rule:
    return FirstOf(tuple(rules))


def zero_or_more(rule: Rule) -> Rule:
    return Repeat(rule, minimum=0)


def one_or_more(rule: Rule) -> Rule:
    return Repeat(rule, minimum=1)


def optional(rule: Rule) -> Rule:
    return Optional_(rule)


def test(rule: Rule) -> Rule:
    return Lookahead(rule)


def test_not(rule: Rule) -> Rule:
    return Lookahead(rule, negate=True)


def capture(rule: Rule) -> Rule:
    return Capture(rule)


def action(name: str, func: Callable[[str], Mapping[str, Any]]) -> Rule:
    return Action(name, func)


def match(rule: Rule, text: str, pos: int = 0) -> Optional[Match]:
    """Match ``rule`` against a prefix of ``text`` starting at ``pos``."""
    return rule.match(text, pos)


def match_all(rule: Rule, text: str) -> Optional[Match]:
    """Match ``rule`` against the whole of ``text``."""
    return Sequence((rule, EOI)).match(text, 0)

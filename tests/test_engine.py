from __future__ import annotations

import unittest

from bartender_lang import GrammarError, engine
from bartender_lang.engine import (
    ANY,
    EOI,
    action,
    any_of,
    capture,
    first_of,
    literal,
    literal_ci,
    match,
    match_all,
    one_of,
    one_or_more,
    optional,
    sequence,
    zero_or_more,
)


class EngineTests(unittest.TestCase):
    def test_literal_is_case_sensitive(self) -> None:
        self.assertEqual(match(literal("of"), "of beer").end, 2)
        self.assertIsNone(match(literal("of"), "OF beer"))

    def test_literal_ci_ignores_case(self) -> None:
        self.assertEqual(match(literal_ci("of"), "OF beer").end, 2)
        self.assertEqual(match(literal_ci("Of"), "oF").end, 2)
        self.assertIsNone(match(literal_ci("of"), "o"))

    def test_match_starts_at_given_position(self) -> None:
        self.assertEqual(match(literal("beer"), "of beer", 3).end, 7)

    def test_any_of(self) -> None:
        self.assertEqual(match(any_of(".!?"), "!").end, 1)
        self.assertIsNone(match(any_of(".!?"), ","))
        self.assertIsNone(match(any_of(".!?"), ""))

    def test_one_of_prefers_longest_word(self) -> None:
        words = one_of(["pint", "pintglass"])
        self.assertEqual(match(words, "pintglass of ale").end, 9)
        self.assertEqual(match(words, "PINTGLASS").end, 9)
        self.assertEqual(match(words, "pint of ale").end, 4)
        self.assertEqual(match(one_of(["a", "an"]), "an").end, 2)
        self.assertIsNone(match(words, "pin"))

    def test_one_of_can_be_case_sensitive(self) -> None:
        self.assertIsNone(match(one_of(["pint"], ignore_case=False), "PINT"))
        self.assertEqual(match(one_of(["pint"], ignore_case=False), "pint").end, 4)

    def test_sequence_backtracks_for_next_alternative(self) -> None:
        rule = first_of(sequence(literal("a"), literal("b")), literal("ac"))
        self.assertEqual(match(rule, "ac").end, 2)

    def test_first_of_commits_to_first_success(self) -> None:
        rule = first_of(literal("a"), literal("ab"))
        self.assertEqual(match(rule, "ab").end, 1)
        self.assertIsNone(match_all(rule, "ab"))

    def test_repetition(self) -> None:
        self.assertEqual(match(zero_or_more(literal("a")), "aaab").end, 3)
        self.assertEqual(match(zero_or_more(literal("a")), "b").end, 0)
        self.assertEqual(match(one_or_more(literal("a")), "aab").end, 2)
        self.assertIsNone(match(one_or_more(literal("a")), "b"))

    def test_zero_width_repetition_terminates(self) -> None:
        self.assertEqual(match(zero_or_more(optional(literal("x"))), "abc").end, 0)

    def test_optional_succeeds_without_consuming(self) -> None:
        self.assertEqual(match(optional(literal("a")), "b").end, 0)
        self.assertEqual(match(optional(literal("a")), "a").end, 1)

    def test_lookahead_never_consumes(self) -> None:
        rule = sequence(engine.test(literal("ab")), literal("a"))
        self.assertEqual(match(rule, "ab").end, 1)
        self.assertIsNone(match(rule, "ac"))
        self.assertEqual(match(engine.test_not(literal("x")), "abc").end, 0)
        self.assertIsNone(match(engine.test_not(literal("a")), "abc"))

    def test_negative_lookahead_bounds_greedy_run(self) -> None:
        rule = one_or_more(sequence(engine.test_not(literal("!")), ANY))
        self.assertEqual(match(rule, "abc!").end, 3)
        self.assertIsNone(match(rule, "!abc"))

    def test_end_of_input(self) -> None:
        self.assertEqual(match(EOI, "").end, 0)
        self.assertIsNone(match(EOI, "x"))
        self.assertEqual(match(EOI, "x", 1).end, 1)
        self.assertIsNone(match_all(literal("ab"), "abc"))
        self.assertIsNotNone(match_all(literal("ab"), "ab"))

    def test_any_char(self) -> None:
        self.assertEqual(match(ANY, "\n").end, 1)
        self.assertIsNone(match(ANY, ""))

    def test_capture_feeds_action(self) -> None:
        rule = sequence(
            capture(one_or_more(any_of("abc"))),
            action("keep", lambda text: {"word": text}),
        )
        self.assertEqual(match(rule, "cab!").reduce(), {"word": "cab"})

    def test_action_uses_most_recent_capture(self) -> None:
        rule = sequence(
            capture(literal("a")),
            capture(literal("b")),
            action("keep", lambda text: {"word": text}),
        )
        self.assertEqual(match(rule, "ab").reduce(), {"word": "b"})

    def test_actions_on_backtracked_branch_never_run(self) -> None:
        calls: list[str] = []

        def record(name):
            def run(text):
                calls.append(name)
                return {name: text}

            return run

        rule = first_of(
            sequence(action("first", record("first")), literal("x")),
            sequence(capture(literal("y")), action("second", record("second"))),
        )
        m = match(rule, "y")
        self.assertEqual(calls, [])
        self.assertEqual(m.reduce(), {"second": "y"})
        self.assertEqual(calls, ["second"])

    def test_lookahead_discards_effects(self) -> None:
        rule = sequence(
            engine.test(sequence(capture(literal("a")), action("seen", lambda t: {"seen": t}))),
            literal("a"),
        )
        self.assertEqual(match(rule, "a").reduce(), {})

    def test_reduce_keeps_initial_fields(self) -> None:
        rule = sequence(capture(literal("a")), action("k", lambda t: {"k": t}))
        self.assertEqual(match(rule, "a").reduce({"z": 1}), {"z": 1, "k": "a"})

    def test_unbound_reference_raises(self) -> None:
        ref = engine.Reference("missing")
        with self.assertRaises(GrammarError):
            match(ref, "x")

    def test_bound_reference_delegates(self) -> None:
        ref = engine.Reference("a")
        ref.bind(literal("a"))
        self.assertEqual(match(sequence(ref, ref), "aa").end, 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)

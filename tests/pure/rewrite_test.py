import unittest

from ape.pure.lexical import lex, parse
from ape.pure.printer import unparse
from ape.pure.rewrite import ExpansionLimitExceeded, State, evaluate, step
from ape.pure.tree import Quotation, Symbol


def program(source):
    return tuple(parse(lex(source)))


def run(source, dictionary=None, stack=()):
    """Evaluates source and returns (dictionary, printed stack in push order)."""
    dictionary, stack, __ = evaluate(dictionary or {}, stack, program(source))
    return dictionary, unparse(reversed(stack))


class PrimitiveTestCase(unittest.TestCase):

    def assert_results(self, cases):
        for case, expected in cases.items():
            self.assertEqual(expected, run(case)[1], case)

    def test_cons(self):
        self.assert_results({
            "a [] cons": "[a]",
            "a [b c] cons": "[a b c]",
            "[a] [b c] cons": "[[a] b c]",
            "a b [] cons cons": "[a b]",
        })

    def test_snoc(self):
        self.assert_results({
            "[a] snoc": "a []",
            "[a b c] snoc": "a [b c]",
            "[[a] b c] snoc": "[a] [b c]",
            "[a b] snoc snoc": "a b []",
        })

    def test_eq(self):
        self.assert_results({
            "foo foo yes no eq": "yes",
            "foo bar yes no eq": "no",
            "[foo bar [baz]] [foo bar [baz]] yes no eq": "yes",
            "[a [b]] [a [b c]] yes no eq": "no",
            "a [a] yes no eq": "no",
            "[] [] [t] [f] eq": "[t]",
            "z a a yes no eq": "z yes",
        })

    def test_eq_symmetric(self):
        pairs = [("a", "a"), ("a", "b"), ("[a [b]]", "[a [b]]"), ("[a [b]]", "[a [b c]]"), ("[]", "a")]
        for x, y in pairs:
            self.assertEqual(run(f"{x} {y} yes no eq")[1], run(f"{y} {x} yes no eq")[1], (x, y))

    def test_let(self):
        self.assert_results({
            "2.71 e let e": "2.71",
            "[cons cons cons] cons3 let a b c [] cons3": "[a b c]",
            "a x let b x let x": "b",
            "a x let x x": "a a",
            "[p q] pq let pq": "p q",
        })

    def test_let_shadowing(self):
        dictionary, result = run("one n let n two n let n n")
        self.assertEqual("one two two", result)
        self.assertEqual({"n": Symbol("two")}, dictionary)

    def test_let_does_not_dispatch_name(self):
        # e is bound, but `e let` binds e again rather than expanding it
        dictionary, result = run("old e let new e let e")
        self.assertEqual("new", result)
        self.assertEqual(Symbol("new"), dictionary["e"])


class DispatchTestCase(unittest.TestCase):

    def test_unbound_words_are_literals(self):
        cases = {
            "a b c": "a b c",
            "[x y] z": "[x y] z",
            "let": "let",
            "cons": "cons",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case)[1], case)

    def test_alias(self):
        dictionary = {"kons": Symbol("cons"), "k": Symbol("kons")}
        self.assertEqual("[a]", run("a [] k", dictionary)[1])

    def test_splice_in_order(self):
        inline = run("a b [] cons cons")[1]
        defined = run("a b [] cons2", {"cons2": Quotation([Symbol("cons"), Symbol("cons")])})[1]
        self.assertEqual("[a b]", inline)
        self.assertEqual(inline, defined)

        self.assertEqual("x y z", run("w", {"w": Quotation([Symbol("x"), Symbol("y"), Symbol("z")])})[1])

    def test_quotations_are_never_looked_up(self):
        self.assertEqual("[w]", run("[w]", {"w": Symbol("boom")})[1])

    def test_cons_snoc_inverse(self):
        cases = [("a", "[]"), ("a", "[b c]"), ("[a]", "[[b] c]"), ("[]", "[]")]
        for value, quotation in cases:
            self.assertEqual(f"{value} {quotation}", run(f"{value} {quotation} cons snoc")[1], (value, quotation))


class MalformedTestCase(unittest.TestCase):

    def test_fall_through(self):
        cases = {
            "[] snoc": "[] snoc",              # empty quotation
            "a snoc": "a snoc",                # not a quotation
            "[a] cons": "[a] cons",            # one operand
            "[a] b cons": "[a] b cons",        # top is not a quotation
            "a b c eq": "a b c eq",            # three operands
            "e let": "e let",                  # empty stack
            "x [n] let": "x [n] let",          # quotations cannot be bound
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case)[1], case)

    def test_fall_through_dispatches(self):
        self.assertEqual("[] bound", run("[] snoc", {"snoc": Symbol("bound")})[1])


class PrecedenceTestCase(unittest.TestCase):

    def test_step(self):
        cases = [
            ((), "a", "dispatch"),
            (("[]", "a"), "cons", "cons"),
            (("[a]",), "snoc", "snoc"),
            (("n", "y", "x", "x"), "eq", "eq"),
            (("v",), "n let", "let"),
            (("[q]", "v"), "cons let", "cons"),   # cons checked before let
            (("[q]",), "snoc let", "snoc"),
            (("v",), "cons let", "let"),          # cons doesn't fit, let binds the word cons
        ]
        for stack, source, expected in cases:
            state = State({}, tuple(tree for item in stack for tree in program(item)), program(source))
            rule, __ = step(state)
            self.assertEqual(expected, rule, (stack, source))

    def test_terminal(self):
        self.assertIsNone(step(State({}, (Symbol("a"),), ())))


class EvaluateTestCase(unittest.TestCase):

    def test_pure(self):
        dictionary = {"w": Symbol("a")}
        stack = [Symbol("s")]
        result = evaluate(dictionary, stack, program("b w let w"))

        self.assertEqual({"w": Symbol("a")}, dictionary)
        self.assertEqual([Symbol("s")], stack)
        self.assertEqual({"w": Symbol("b")}, result.dictionary)
        self.assertEqual((Symbol("b"), Symbol("s")), result.stack)
        self.assertEqual((), result.program)

    def test_threading(self):
        dictionary, stack, __ = evaluate({}, (), program("[cons cons] cons2 let a"))
        dictionary, stack, __ = evaluate(dictionary, stack, program("b [] cons2"))
        self.assertEqual("[a b]", unparse(reversed(stack)))

    def test_long_expansion(self):
        # deeper than the host recursion limit
        count = 5000
        dictionary = {"w0": Symbol("done")}
        for idx in range(1, count):
            dictionary[f"w{idx}"] = Quotation([Symbol(f"w{idx - 1}")])
        self.assertEqual("done", run(f"w{count - 1}", dictionary)[1])

    def test_max_steps(self):
        loop = {"loop": Quotation([Symbol("loop")])}
        with self.assertRaises(ExpansionLimitExceeded) as context:
            evaluate(loop, (), program("loop"), max_steps=50)
        self.assertEqual(50, context.exception.steps)

        self.assertEqual((Symbol("a"),), evaluate({}, (), program("a"), max_steps=1).stack)

    def test_trace(self):
        steps = []
        evaluate({}, (), program("a [] cons"), trace=lambda rule, state: steps.append((rule, unparse(state.stack))))
        self.assertEqual([("dispatch", "a"), ("dispatch", "[] a"), ("cons", "[a]")], steps)


if __name__ == '__main__':
    unittest.main()

"""The Ape rewriting machine. A state is a (dictionary, stack, program) triple, and evaluation applies the
highest-priority matching rule until the program is empty.

Rules, in order of precedence (stack written top-first, program head-first):

```
cons      [q...] v ..      cons ..       =>  [v q...] ..               ..
snoc      [v q...] ..      snoc ..       =>  [q...] v ..               ..
eq        f t y x ..       eq ..         =>  (t if x == y else f) ..   ..
let       v ..             n let ..      =>  ..                        ..           with n -> v in the dictionary
dispatch  ..               w ..          =>  ..                        s ..         if w -> symbol s
                                         =>  ..                        q... ..      if w -> [q...]
                                         =>  w ..                      ..           otherwise
```

There is no error state. A primitive whose operands don't fit falls through to dispatch and is either expanded (if
bound) or pushed as a literal symbol. Equality in eq is deep structural equality.

Evaluation is an explicit loop, so expansion depth is bounded only by memory. Definitions that expand into
themselves never terminate unless a step ceiling is given.
"""

from collections import namedtuple

from ape.lang.error import GenericException
from ape.pure.tree import Quotation, Symbol

State = namedtuple("State", ["dictionary", "stack", "program"])

CONS = Symbol("cons")
SNOC = Symbol("snoc")
EQ = Symbol("eq")
LET = Symbol("let")


class ExpansionLimitExceeded(GenericException):
    """Raised when evaluate is given max_steps and the program is still running after that many steps."""

    def __init__(self, steps):
        super().__init__("expansion limit exceeded after {} rewrite steps", str(steps), diagnosis=False)
        self.steps = steps


def cons(state):
    dictionary, stack, program = state
    if program and program[0] == CONS and len(stack) >= 2 and isinstance(stack[0], Quotation):
        quotation, value = stack[0], stack[1]
        return State(dictionary, (Quotation((value,) + quotation.items),) + stack[2:], program[1:])


def snoc(state):
    dictionary, stack, program = state
    if program and program[0] == SNOC and stack and isinstance(stack[0], Quotation) and stack[0].items:
        value, *rest = stack[0].items
        return State(dictionary, (Quotation(rest), value) + stack[1:], program[1:])


def eq(state):
    dictionary, stack, program = state
    if program and program[0] == EQ and len(stack) >= 4:
        if_false, if_true, y, x = stack[:4]
        return State(dictionary, (if_true if x == y else if_false,) + stack[4:], program[1:])


def let(state):
    dictionary, stack, program = state
    if stack and len(program) >= 2 and isinstance(program[0], Symbol) and program[1] == LET:
        return State({**dictionary, program[0].text: stack[0]}, stack[1:], program[2:])


def dispatch(state):
    dictionary, stack, program = state
    if not program:
        return None

    word, rest = program[0], program[1:]
    if isinstance(word, Symbol) and word.text in dictionary:
        found = dictionary[word.text]
        if isinstance(found, Quotation):
            return State(dictionary, stack, found.items + rest)
        return State(dictionary, stack, (found,) + rest)

    return State(dictionary, (word,) + stack, rest)


RULES = (cons, snoc, eq, let, dispatch)


def step(state):
    """Applies the first matching rule to state. Returns (rule name, new state), or None if state is terminal."""
    for rule in RULES:
        new_state = rule(state)
        if new_state is not None:
            return rule.__name__, new_state
    return None


def evaluate(dictionary, stack, program, max_steps=None, trace=None):
    """Rewrites (dictionary, stack, program) until the program is empty and returns the terminal State.

    :param dictionary: mapping of word name to bound Tree, not modified
    :param stack: sequence of Trees, top first
    :param program: sequence of Trees to run, head first
    :param max_steps: optional ceiling on rewrite steps, ExpansionLimitExceeded is raised past it
    :param trace: optional callable, called as trace(rule name, state) after every step
    """
    state = State(dict(dictionary), tuple(stack), tuple(program))

    steps = 0
    result = step(state)
    while result is not None:
        if max_steps is not None and steps >= max_steps:
            raise ExpansionLimitExceeded(steps)

        rule, state = result
        steps += 1
        if trace is not None:
            trace(rule, state)

        result = step(state)

    return state

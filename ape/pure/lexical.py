"""Lexical analysis for Ape: raw text to tokens (lex), and tokens to a program of Trees (parse).

Surface syntax is as small as it gets:

```
<program> ::= <tree>*
<tree>    ::= <symbol>                ; maximal run of characters that are neither whitespace nor brackets
            | "[" <tree>* "]"         ; quotation
```

There is no escaping, no comments and no literal syntax other than symbols. `[` and `]` are always tokens of their
own, even when glued to a symbol: `[a]` lexes to `[`, `a`, `]`.

Brackets are handled permissively. An unmatched `]` ends the current level early, which at top level means the rest
of the tokens are dropped. An unclosed `[` is closed at end of input. Neither raises. `unbalanced_brackets` lets callers
notice these cases and warn about them.
"""

from ape.pure.tree import Quotation, Symbol

OPEN = "["
CLOSE = "]"


def lex(source):
    """Splits source into a list of non-empty string tokens."""
    tokens = []
    token = ""

    for char in source:
        if char == OPEN or char == CLOSE:
            if token:
                tokens.append(token)
            tokens.append(char)
            token = ""
        elif char.isspace():
            if token:
                tokens.append(token)
            token = ""
        else:
            token += char

    if token:
        tokens.append(token)
    return tokens


def parse(tokens):
    """Converts tokens into a program (list of Trees). See module docstring for the bracket policy."""

    def _parse(idx):
        result = []
        while idx < len(tokens):
            token = tokens[idx]
            idx += 1

            if token == OPEN:
                nested, idx = _parse(idx)
                result.append(Quotation(nested))
            elif token == CLOSE:
                return result, idx
            else:
                result.append(Symbol(token))
        return result, idx

    program, __ = _parse(0)
    return program


def unbalanced_brackets(source):
    """Returns (columns of '[' left open, column of the first unmatched ']' or None). Does not affect parsing."""
    opened = []
    for col, char in enumerate(source):
        if char == OPEN:
            opened.append(col)
        elif char == CLOSE:
            if not opened:
                return opened, col
            opened.pop()
    return opened, None

"""The two shapes of Ape data: atomic Symbols and Quotations (ordered lists of Symbols/Quotations). There are no
numbers, strings or booleans. Everything else is built from these two shapes by dictionary definitions.

```
<tree>      ::= <symbol>              ; any maximal run of non-whitespace, non-bracket characters
              | "[" <tree>* "]"       ; quotation: code and data at the same time
```

Trees are immutable and compared structurally, so `[a [b]]` equals `[a [b]]` but not `[a [b c]]`.
"""

from abc import ABC
from dataclasses import dataclass


class Tree(ABC):
    """Superclass of every Ape value."""


@dataclass(frozen=True)
class Symbol(Tree):
    """Atomic token. Used as a word when it sits in the program, as data when it sits on the stack."""
    text: str

    def __str__(self):
        return self.text


@dataclass(frozen=True)
class Quotation(Tree):
    """Ordered, possibly nested, list of trees. Equality is deep equality over items."""
    items: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

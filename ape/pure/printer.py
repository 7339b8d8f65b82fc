"""Renders Trees back to Ape source text. Left inverse of parse(lex(...)) for canonically spaced text."""

from ape.pure.tree import Quotation


def unparse(trees):
    """Returns trees as single-space-separated text, with quotations bracketed: [a [b c]]."""
    rendered = []
    for tree in trees:
        if isinstance(tree, Quotation):
            rendered.append(f"[{unparse(tree.items)}]")
        else:
            rendered.append(tree.text)
    return " ".join(rendered)

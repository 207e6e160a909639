import logging

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError

from lexer import MalformedExpression, variable_name

logger = logging.getLogger(__name__)

# whitespace is stripped before parsing, so nothing is %ignore'd here
expression_grammar = r"""
    expr: [SIGN] term (SIGN term)*

    ?term: NUMBER -> number
         | VARREF -> variable

    SIGN: "+" | "-"
    NUMBER: /\d+/
    VARREF: /\$\w+/
"""

_parser = Lark(expression_grammar, parser="lalr", start="expr", lexer="basic")


def wrap_int(value, bits):
    """Two's complement wrap of ``value`` to ``bits`` bits (None: no wrap)."""
    if bits is None:
        return value
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half


@v_args(inline=True)
class ExpressionFolder(Transformer):
    """Folds the signed terms of an expression left to right, no precedence."""

    def __init__(self, lookup, int_bits=32):
        super().__init__()
        self.lookup = lookup
        self.int_bits = int_bits

    def number(self, tok):
        return wrap_int(int(tok), self.int_bits)

    def variable(self, tok):
        return self.lookup(variable_name(str(tok)))

    def expr(self, *items):
        # items: [SIGN|None, term, SIGN, term, ...]
        op = str(items[0]) if items[0] is not None else '+'
        result = 0
        for item in items[1:]:
            if isinstance(item, int):
                result = result + item if op == '+' else result - item
                result = wrap_int(result, self.int_bits)
            else:
                op = str(item)
        return result


def _lex_window(text, pos, width=40):
    a = max(0, pos-width//2); b = min(len(text), pos+width//2)
    caret = ' ' * (pos-a) + '^'
    return text[a:b] + "\n" + caret


def parse_expression(expression):
    """Parse tree for a whitespace-free expression; MalformedExpression on bad input."""
    try:
        return _parser.parse(expression)
    except UnexpectedInput as e:
        pos = getattr(e, 'pos_in_stream', None)
        if pos is None or pos < 0:
            pos = len(expression)
        raise MalformedExpression(
            f"Malformed expression {expression!r}\n{_lex_window(expression, pos)}",
            expression,
        ) from None


def evaluate(expression, lookup, int_bits=32):
    """
    Evaluate ``expression`` (whitespace already removed) to an int.

    ``lookup`` maps a variable name (without the sigil) to its value and is
    expected to raise for unknown names; that error propagates unchanged.
    """
    if expression == '':
        raise MalformedExpression("Empty expression", expression)
    tree = parse_expression(expression)
    try:
        value = ExpressionFolder(lookup, int_bits).transform(tree)
    except VisitError as e:
        raise e.orig_exc from None
    logger.debug("evaluated %r -> %d", expression, value)
    return value

import re
from typing import List, Optional

# =========================
# Errors
# =========================
class ScriptError(Exception):
    """Base class for interpreter errors."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message
        # filled in by the runner once the failing line is known
        self.line_no = None
        self.line = None
        self.source_name = None

    def attach(self, line_no, line, source_name):
        if self.line_no is None:
            self.line_no = line_no
            self.line = line
            self.source_name = source_name
        return self


class ScriptParseError(ScriptError):
    """Raised when a line cannot be understood."""


class UnsupportedStatement(ScriptParseError):
    def __init__(self, line):
        super().__init__(f"Unsupported command: {line}")
        self.statement = line


class MalformedAssignment(ScriptParseError):
    pass


class MalformedExpression(ScriptParseError):
    def __init__(self, message, expression):
        super().__init__(message)
        self.expression = expression


# =========================
# Tokenizer (regex driven)
# =========================
SIGIL = '$'

VARIABLE_RE = re.compile(r'\$\w+')
# order matters: a quoted literal wins over the digits/refs inside it
PRINT_RE = re.compile(r'"[^"]+"|-?\$\w+|-?\d+')
ASSIGN_SPLIT_RE = re.compile(r'\s*=\s*')
WHITESPACE_RE = re.compile(r'\s+')


class Token:
    def __init__(self, typ, val, pos):
        self.type = typ  # 'STR','VAR','NUM'
        self.val = val
        self.pos = pos

    def __repr__(self):
        return f"Token({self.type},{self.val!r})"

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type, self.val, self.pos) == (other.type, other.val, other.pos)


def find_first(text: str, pattern: re.Pattern) -> Optional[str]:
    """Leftmost match of ``pattern`` in ``text``, or None."""
    m = pattern.search(text)
    return m.group(0) if m else None


def find_all(text: str, pattern: re.Pattern) -> List[str]:
    return [m.group(0) for m in pattern.finditer(text)]


def strip_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub('', text)


def variable_name(ref: str) -> str:
    """``$name`` / ``-$name`` -> ``name``"""
    return ref.lstrip('-')[len(SIGIL):]


def tokenize_print(line: str) -> List[Token]:
    """
    Pull the printable tokens out of a print line in order of appearance.

    Matching is by pattern, not by grammar: anything between tokens
    (including the ``print`` keyword itself) is ignored.
    """
    tokens = []
    for m in PRINT_RE.finditer(line):
        s = m.group(0)
        if s.startswith('"'):
            tokens.append(Token('STR', s[1:-1], m.start()))
        elif SIGIL in s:
            tokens.append(Token('VAR', s, m.start()))
        else:
            tokens.append(Token('NUM', s, m.start()))
    return tokens

import logging
from typing import Callable, Dict, Iterable, Optional

from expression import evaluate, wrap_int
from lexer import (
    ASSIGN_SPLIT_RE, VARIABLE_RE, MalformedAssignment, ScriptError,
    UnsupportedStatement, find_first, strip_whitespace, tokenize_print,
    variable_name,
)

logger = logging.getLogger(__name__)

SKIP = 'SKIP'
ASSIGN = 'ASSIGN'
PRINT = 'PRINT'


class ScriptRuntimeError(ScriptError):
    """Raised for faults while executing a well-formed line."""


class UndefinedVariable(ScriptRuntimeError):
    def __init__(self, name):
        super().__init__(f"Variable not found: {name}")
        self.name = name


class VariableStore:
    """Variables of one interpreter session: name (no sigil) -> int."""

    def __init__(self):
        self._values: Dict[str, int] = {}

    def set(self, name: str, value: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Variable '{name}' must hold an int, got {type(value).__name__}")
        self._values[name] = value

    def get(self, name: str) -> int:
        try:
            return self._values[name]
        except KeyError:
            raise UndefinedVariable(name) from None

    def snapshot(self) -> Dict[str, int]:
        return dict(self._values)

    def __contains__(self, name):
        return name in self._values

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return f"VariableStore({self._values!r})"


def classify_line(line: str) -> str:
    """SKIP, ASSIGN or PRINT for a raw line; UnsupportedStatement otherwise."""
    stripped = line.strip()
    if stripped == '' or stripped.startswith('#'):
        return SKIP
    # prefix test on the raw line: leading whitespace is not forgiven here
    if line.startswith('set'):
        return ASSIGN
    if line.startswith('print'):
        return PRINT
    raise UnsupportedStatement(line)


class Interpreter:
    def __init__(self, output_sink: Optional[Callable[[str], None]] = None, int_bits: Optional[int] = 32):
        self.variables = VariableStore()
        self.output_sink = output_sink if output_sink is not None else print
        self.int_bits = int_bits

    # ---- statements ----
    def assign(self, line: str) -> None:
        parts = ASSIGN_SPLIT_RE.split(line, maxsplit=1)
        if len(parts) < 2:
            raise MalformedAssignment(f"Missing '=' in assignment: {line}")
        target = find_first(parts[0], VARIABLE_RE)
        if target is None:
            raise MalformedAssignment(f"No variable to assign to: {line}")
        expression = strip_whitespace(parts[1])
        if expression == '':
            raise MalformedAssignment(f"Missing expression in assignment: {line}")

        value = evaluate(expression, self.variables.get, self.int_bits)
        name = variable_name(target)
        self.variables.set(name, value)
        logger.debug("set %s = %d", name, value)

    def format_print(self, line: str) -> str:
        out = []
        for tok in tokenize_print(line):
            if tok.type == 'STR':
                out.append(tok.val)
            elif tok.type == 'VAR':
                value = self.variables.get(variable_name(tok.val))
                if tok.val.startswith('-'):
                    value = wrap_int(-value, self.int_bits)
                out.append(str(value))
            else:
                out.append(tok.val)
        return ''.join(out)

    def print_line(self, line: str) -> None:
        self.output_sink(self.format_print(line))

    # ---- dispatch ----
    def execute_line(self, line: str) -> str:
        kind = classify_line(line)
        logger.debug("%s: %s", kind, line)
        if kind == ASSIGN:
            self.assign(line)
        elif kind == PRINT:
            self.print_line(line)
        return kind

    def run_lines(self, lines: Iterable[str], source_name: str = '<lines>') -> None:
        logger.debug("running %s", source_name)
        line_no = 0
        for line_no, raw in enumerate(lines, start=1):
            line = raw.rstrip('\r\n')
            try:
                self.execute_line(line)
            except ScriptError as e:
                e.attach(line_no, line, source_name)
                raise
        logger.debug("finished %s after %d line(s)", source_name, line_no)

    def run_source(self, text: str, source_name: str = '<string>') -> None:
        self.run_lines(text.splitlines(), source_name)

    def run_file(self, path, encoding: str = 'utf-8') -> None:
        with open(path, 'r', encoding=encoding) as f:
            self.run_lines(f, str(path))

# texpipe/parser.py
from typing import List, Optional, Union

from .schemas import (FractionNode, GroupNode, MathNode, OperatorNode, RootNode, SubscriptNode,
                      SuperscriptNode, SymbolNode, TextNode)
from .tokenizer import tokenize

FRACTION_COMMAND = '\\frac'
# Deepest nesting the parser follows. Past it, braces and \frac are kept as flat tokens and
# further scripts are left for the enclosing level. A script chain can stack on top of a
# nested argument, so trees stay under 2 * MAX_NESTING_DEPTH + 3 levels.
MAX_NESTING_DEPTH = 50


class LatexParser:
    """
    Recursive-descent parser turning a LaTeX math string into a ``RootNode`` tree.

    The parser never raises on malformed input. Unknown commands become symbols, unterminated
    groups close at the end of input and a dangling ``_``/``^`` gets an empty text argument.
    Nesting deeper than ``MAX_NESTING_DEPTH`` is flattened instead of recursed into.
    """

    def __init__(self, source: Union[str, List[str]]):
        self.tokens: List[str] = tokenize(source) if isinstance(source, str) else list(source)
        self.pos = 0
        self.depth = 0

    # --- Cursor primitives ---
    def peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def consume(self) -> Optional[str]:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def expect(self, token: str) -> bool:
        if self.peek() == token:
            self.consume()
            return True
        return False

    # --- Grammar ---
    def parse_argument(self, greedy: bool) -> MathNode:
        """
        Parses one argument of a fraction or a script.

        A braced argument always becomes a group. A bare argument is a single element: with
        ``greedy`` it keeps its own scripts (``\\frac a^2 b`` has numerator ``a^2``), without it
        stops at the atom so that in ``x_i^2`` the ``^2`` attaches to ``x_i`` and not to ``i``.
        """
        if self.peek() == '{':
            return self.parse_group()
        if greedy:
            return self.parse_next()
        return self.parse_atom()

    def parse_group(self) -> MathNode:
        token = self.consume()  # {
        if self.depth >= MAX_NESTING_DEPTH:
            return OperatorNode(value=token)

        self.depth += 1
        children: List[MathNode] = []
        while self.peek() is not None and self.peek() != '}':
            children.append(self.parse_next())
        self.expect('}')
        self.depth -= 1
        return GroupNode(children=tuple(children))

    def parse_atom(self) -> MathNode:
        """Parses a single command, literal or operator without looking for scripts."""
        token = self.consume()
        if token is None:
            return TextNode(value='')

        if token.startswith('\\'):
            if token == FRACTION_COMMAND and self.depth < MAX_NESTING_DEPTH:
                self.depth += 1
                numerator = self.parse_argument(greedy=True)
                denominator = self.parse_argument(greedy=True)
                self.depth -= 1
                return FractionNode(numerator=numerator, denominator=denominator)
            return SymbolNode(value=token)

        if len(token) == 1 and token.isascii() and token.isalnum():
            return TextNode(value=token)

        return OperatorNode(value=token)

    def parse_next(self) -> MathNode:
        node = self.parse_group() if self.peek() == '{' else self.parse_atom()

        # Each attached script wraps the node one level deeper.
        entry_depth = self.depth
        while self.peek() in ('_', '^') and self.depth < MAX_NESTING_DEPTH:
            self.depth += 1
            if self.consume() == '_':
                node = SubscriptNode(base=node, sub=self.parse_argument(greedy=False))
            else:
                node = SuperscriptNode(base=node, sup=self.parse_argument(greedy=False))
        self.depth = entry_depth

        return node

    def parse(self) -> RootNode:
        children: List[MathNode] = []
        while self.peek() is not None:
            children.append(self.parse_next())
        return RootNode(children=tuple(children))


def parse_latex(latex_string: str) -> RootNode:
    """Tokenizes and parses ``latex_string`` in one call."""
    return LatexParser(latex_string).parse()

"""Input parsing and result formatting module.

This module handles:
- Input validation (length, balanced parentheses, nesting depth)
- Tokenizing a statement line
- Precedence-climbing parsing of expressions into the syntax tree
- Statement dispatch (assignment, function definition, solve, plot, expression)
- Number formatting for display
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from . import config as _config
from .config import KEYWORDS, MAX_EXPRESSION_DEPTH, MAX_INPUT_LENGTH, TOKEN_REGEX
from .logging_config import get_logger
from .nodes import (
    Assignment,
    CustomFunction,
    Expression,
    FunctionCall,
    FunctionDefinition,
    Number,
    Operand,
    Operation,
    PlotRequest,
    SolveFor,
    Statement,
    Symbol,
    Term,
)
from .types import ParseError

logger = get_logger("parser")

LEFT, RIGHT = "left", "right"

# operator text -> (operation, precedence, associativity)
OPERATORS: dict[str, tuple[Operation, int, str]] = {
    "+": (Operation.ADD, 1, LEFT),
    "-": (Operation.SUB, 1, LEFT),
    "*": (Operation.MUL, 2, LEFT),
    "/": (Operation.DIV, 2, LEFT),
    "%": (Operation.REM, 2, LEFT),
    "^": (Operation.POW, 3, RIGHT),
}


def format_number(val: Any, precision: int | None = None) -> str:
    """Format a numeric value with specified precision.

    Args:
        val: Numeric value to format
        precision: Number of significant digits (default: OUTPUT_PRECISION)

    Returns:
        Formatted string representation of the number
    """
    if precision is None:
        precision = _config.OUTPUT_PRECISION
    try:
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        # Fallback for non-numeric values
        return str(val)


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses are balanced. Returns (is_balanced, error_position)."""
    stack: list[int] = []
    for i, char in enumerate(input_str):
        if char == "(":
            stack.append(i)
        elif char == ")":
            if not stack:
                return False, i
            stack.pop()
    if stack:
        return False, stack[0]  # Return position of first unmatched
    return True, None


@dataclass(frozen=True)
class Token:
    kind: str  # number, ident, assign, op, lparen, rparen, comma, equals, end
    text: str
    position: int


def tokenize(text: str) -> list[Token]:
    """Split a line into tokens, always terminated by an ``end`` token.

    Raises:
        ParseError: INVALID_EXPRESSION on a character outside the grammar
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = TOKEN_REGEX.match(text, pos)
        if match is None:
            raise ParseError(
                f"Invalid expression - unexpected character `{text[pos]}` at position {pos}",
                "INVALID_EXPRESSION",
                text=text[pos],
                position=pos,
            )
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


class _Parser:
    """Recursive descent over the statement forms, precedence climbing for expressions."""

    def __init__(self, text: str, tokens: list[Token]):
        self.text = text
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    # token helpers

    def peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.index + offset, len(self.tokens) - 1)]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != "end":
            self.index += 1
        return token

    def rest(self) -> str:
        return self.text[self.peek().position :].strip()

    def at_keyword(self, word: str) -> bool:
        token = self.peek()
        return token.kind == "ident" and token.text == word

    def is_symbol(self, token: Token) -> bool:
        return token.kind == "ident" and token.text not in KEYWORDS

    def expect_end(self) -> None:
        token = self.peek()
        if token.kind == "end":
            return
        if token.kind in ("number", "ident", "lparen"):
            raise ParseError(
                f"Invalid operation - expected +, -, *, /, %, or ^ `{token.text}`",
                "INVALID_OPERATION",
                text=token.text,
                position=token.position,
            )
        raise ParseError(
            f"Invalid expression - unexpected `{token.text}` at position {token.position}",
            "INVALID_EXPRESSION",
            text=token.text,
            position=token.position,
        )

    def enter(self, token: Token) -> None:
        # parentheses and operators both nest here, so allow twice the nesting depth;
        # parse() checks the exact nesting depth afterwards
        self.depth += 1
        if self.depth > 2 * MAX_EXPRESSION_DEPTH:
            raise ParseError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)",
                "TOO_DEEP",
                text=token.text,
                position=token.position,
            )

    # expressions

    def parse_expression(self, min_precedence: int = 1) -> Operand:
        lhs = self.parse_atom()
        while True:
            token = self.peek()
            if token.kind != "op":
                return lhs
            operation, precedence, assoc = OPERATORS[token.text]
            if precedence < min_precedence:
                return lhs
            self.advance()
            self.enter(token)
            rhs = self.parse_expression(precedence + 1 if assoc == LEFT else precedence)
            self.depth -= 1
            lhs = Term(operation, lhs, rhs)

    def parse_number(self, token: Token, sign: str = "") -> Number:
        literal = sign + token.text
        try:
            return Number(float(literal))
        except ValueError:
            raise ParseError(
                f"Invalid number - expected a floating number `{literal}`",
                "INVALID_NUMBER",
                text=literal,
                position=token.position - len(sign),
            ) from None

    def parse_atom(self) -> Operand:
        token = self.peek()
        if token.kind == "number":
            self.advance()
            return self.parse_number(token)
        if token.kind == "op" and token.text == "-":
            # a sign glued to a literal in operand position: -4, 3 * -4
            following = self.peek(1)
            if following.kind == "number" and following.position == token.position + 1:
                self.advance()
                self.advance()
                return self.parse_number(following, sign="-")
        if self.is_symbol(token):
            self.advance()
            if self.peek().kind == "lparen":
                return self.parse_call(token)
            return Symbol(token.text)
        if token.kind == "lparen":
            self.advance()
            self.enter(token)
            inner = self.parse_expression()
            closing = self.peek()
            if closing.kind != "rparen":
                self.expect_end()
                raise ParseError(
                    f"Invalid expression - missing `)` for `(` at position {token.position}",
                    "INVALID_EXPRESSION",
                    text=closing.text,
                    position=closing.position,
                )
            self.advance()
            self.depth -= 1
            return inner
        found = token.text if token.kind != "end" else "end of input"
        raise ParseError(
            f"Invalid operand - expected variable, number or term, but got `{found}`",
            "INVALID_OPERAND",
            text=token.text,
            position=token.position,
        )

    def parse_call(self, name: Token) -> FunctionCall:
        opening = self.advance()
        self.enter(opening)
        args: list[Operand] = []
        if self.peek().kind == "rparen":
            self.advance()
            self.depth -= 1
            return FunctionCall(name.text, ())
        while True:
            token = self.peek()
            if token.kind in ("comma", "rparen"):
                raise ParseError(
                    f"Expected expression as parameter value, but got `{token.text}`",
                    "EXPECTED_PARAM_EXPRESSION",
                    text=token.text,
                    position=token.position,
                )
            args.append(self.parse_expression())
            token = self.peek()
            if token.kind == "comma":
                self.advance()
                continue
            if token.kind == "rparen":
                self.advance()
                self.depth -= 1
                return FunctionCall(name.text, tuple(args))
            self.expect_end()
            raise ParseError(
                f"Invalid expression - missing `)` for call of `{name.text}`",
                "INVALID_EXPRESSION",
                text=token.text,
                position=token.position,
            )

    # statements

    def parse_statement(self) -> Statement:
        first = self.peek()
        if first.kind == "end":
            raise ParseError("Expected statement, but got an empty line", "EMPTY_STATEMENT")
        if self.at_keyword("solve"):
            return self.parse_solve_for()
        if self.at_keyword("plot"):
            return self.parse_plot()
        if any(token.kind == "assign" for token in self.tokens):
            return self.parse_definition()
        if first.kind == "ident" and first.text in KEYWORDS:
            raise ParseError(
                "Invalid statement - expected assignment, expression, or solve "
                f"statement, but got `{self.rest()}`",
                "INVALID_STATEMENT",
                text=first.text,
                position=first.position,
            )
        operand = self.parse_expression()
        self.expect_end()
        return Expression(operand)

    def parse_solve_for(self) -> SolveFor:
        self.advance()
        token = self.peek()
        if token.kind in ("equals", "end"):
            raise ParseError(
                f"Expected expression in solve left from the `=`, but got `{self.rest()}`",
                "MISSING_SOLVE_LEFT",
                text=token.text,
                position=token.position,
            )
        lhs = self.parse_expression()
        if self.peek().kind != "equals":
            self.expect_end()
            token = self.peek()
            raise ParseError(
                f"Invalid expression - expected `=` in solve, but got `{self.rest()}`",
                "INVALID_EXPRESSION",
                text=token.text,
                position=token.position,
            )
        self.advance()
        token = self.peek()
        if token.kind == "end" or self.at_keyword("for"):
            raise ParseError(
                f"Expected expression in solve right from the `=`, but got `{self.rest()}`",
                "MISSING_SOLVE_RIGHT",
                text=token.text,
                position=token.position,
            )
        rhs = self.parse_expression()
        if not self.at_keyword("for"):
            self.expect_end()
            raise ParseError(
                "Invalid expression - expected `for` after the equation, but got nothing",
                "INVALID_EXPRESSION",
                position=self.peek().position,
            )
        self.advance()
        token = self.peek()
        if not self.is_symbol(token):
            raise ParseError(
                f"Expected variable name after `for`, but got `{self.rest()}`",
                "MISSING_SOLVE_SYMBOL",
                text=token.text,
                position=token.position,
            )
        self.advance()
        self.expect_end()
        return SolveFor(lhs, rhs, token.text)

    def parse_plot(self) -> PlotRequest:
        self.advance()
        token = self.peek()
        if token.kind == "end":
            raise ParseError(
                "Plot is missing a function name, but got nothing", "PLOT_MISSING_FUNCTION"
            )
        if not self.is_symbol(token) or self.peek(1).kind != "end":
            raise ParseError(
                f"Expected function name, but got {self.rest()}",
                "PLOT_UNEXPECTED_SYMBOL",
                text=self.rest(),
                position=token.position,
            )
        self.advance()
        return PlotRequest(token.text)

    def parse_definition(self) -> Assignment | FunctionDefinition:
        target = self.peek()
        if target.kind == "assign":
            raise ParseError(
                f"Missing assignment target - expected symbol, but got `{self.rest()}`",
                "MISSING_ASSIGNMENT_TARGET",
                text=self.rest(),
                position=target.position,
            )
        if target.kind == "lparen":
            raise ParseError("No function name found", "MISSING_FUNCTION_NAME", position=target.position)
        if not self.is_symbol(target):
            raise ParseError(
                f"Invalid symbol - expected a name, but got `{target.text}`",
                "INVALID_SYMBOL",
                text=target.text,
                position=target.position,
            )
        self.advance()
        if self.peek().kind == "lparen":
            return self.parse_function(target.text)
        self.expect_assign()
        if self.peek().kind == "end":
            raise ParseError(
                f"Expected an expression, but got `{self.rest()}`",
                "MISSING_ASSIGNMENT_EXPRESSION",
                position=self.peek().position,
            )
        operand = self.parse_expression()
        self.expect_end()
        return Assignment(target.text, operand)

    def expect_assign(self) -> None:
        token = self.peek()
        if token.kind != "assign":
            raise ParseError(
                f"Expected an assignment `:=`, but got `{self.rest()}`",
                "MISSING_ASSIGNMENT",
                text=token.text,
                position=token.position,
            )
        self.advance()

    def parse_function(self, name: str) -> FunctionDefinition:
        self.advance()
        params: list[str] = []
        if self.peek().kind == "rparen":
            self.advance()
        else:
            while True:
                token = self.advance()
                if not self.is_symbol(token):
                    raise ParseError(
                        f"Invalid symbol - expected parameter name, but got `{token.text}`",
                        "INVALID_SYMBOL",
                        text=token.text,
                        position=token.position,
                    )
                if token.text in params:
                    raise ParseError(
                        f"Parameter `{token.text}` is declared twice in `{name}`",
                        "DUPLICATE_PARAMETER",
                        text=token.text,
                        position=token.position,
                    )
                params.append(token.text)
                separator = self.advance()
                if separator.kind == "rparen":
                    break
                if separator.kind != "comma":
                    raise ParseError(
                        f"Invalid expression - expected `,` or `)` in parameter list, "
                        f"but got `{separator.text}`",
                        "INVALID_EXPRESSION",
                        text=separator.text,
                        position=separator.position,
                    )
        self.expect_assign()
        if self.peek().kind == "end":
            raise ParseError(
                "Expected expression as function body, but got nothing",
                "MISSING_FUNCTION_BODY",
                position=self.peek().position,
            )
        body = self.parse_expression()
        self.expect_end()
        return FunctionDefinition(name, CustomFunction(tuple(params), body))


def parse(text: str) -> Statement:
    """Parse one line into a statement.

    Args:
        text: Source line (e.g. "a := 2", "solve 3*x = 6 for x", "f(x) := x^2")

    Returns:
        The statement tree

    Raises:
        ParseError: On the first grammar or literal error; see the ``code`` attribute
    """
    if len(text) > MAX_INPUT_LENGTH:
        raise ParseError(
            f"Input too long (max {MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    balanced, position = is_balanced(text)
    if not balanced:
        raise ParseError(
            f"Invalid expression - unbalanced parenthesis at position {position}",
            "INVALID_EXPRESSION",
            text=text[position],
            position=position,
        )
    statement = _Parser(text, tokenize(text)).parse_statement()
    for operand in _statement_operands(statement):
        if operand_depth(operand) > MAX_EXPRESSION_DEPTH:
            raise ParseError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)", "TOO_DEEP"
            )
    logger.debug("parsed %r as %s", text, type(statement).__name__)
    return statement


def _statement_operands(statement: Statement) -> list[Operand]:
    if isinstance(statement, (Expression, Assignment)):
        return [statement.operand]
    if isinstance(statement, SolveFor):
        return [statement.lhs, statement.rhs]
    if isinstance(statement, FunctionDefinition):
        return [statement.function.body]
    return []


def operand_depth(operand: Operand) -> int:
    """Nesting depth of an operand tree, computed without recursion.

    The left operand of a term continues its chain at the same level, so a
    left-associative sequence such as ``1 + 2 + ... + n`` has depth 2 however
    long it is. Right operands and call arguments add a level.
    """
    deepest = 0
    stack = [(operand, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(node, Term):
            stack.append((node.lhs, depth))
            stack.append((node.rhs, depth + 1))
        elif isinstance(node, FunctionCall):
            stack.extend((arg, depth + 1) for arg in node.args)
    return deepest


def parse_operand(text: str) -> Operand:
    """Parse a line that must be a plain expression.

    Raises:
        ParseError: INVALID_STATEMENT if the line is another kind of statement
    """
    statement = parse(text)
    if not isinstance(statement, Expression):
        raise ParseError(
            f"Invalid statement - expected an expression, but got `{text.strip()}`",
            "INVALID_STATEMENT",
            text=text.strip(),
        )
    return statement.operand

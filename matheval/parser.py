"""Recursive descent parser.

Grammar, lowest to highest precedence::

    assignment  -> IDENTIFIER EQUAL assignment | expression
    expression  -> term ((PLUS | MINUS) term)*
    term        -> factor ((STAR | SLASH) factor)*
    factor      -> power
    power       -> unary (CARET power)?
    unary       -> (PLUS | MINUS)? postfix
    postfix     -> primary EXCLAMATION*
    primary     -> NUMBER | IDENTIFIER | function_call | BRACKET_OPEN expression BRACKET_CLOSE
    function_call -> IDENTIFIER BRACKET_OPEN arguments? BRACKET_CLOSE
    arguments   -> expression (COMMA expression)*
"""

from dataclasses import dataclass

from matheval.nodes import (
    Assignment,
    BinaryOperation,
    BinaryOperator,
    Expression,
    Function,
    FunctionCall,
    Number,
    PostfixOperation,
    PostfixOperator,
    UnaryOperation,
    UnaryOperator,
    Variable,
)
from matheval.tokenizer import Token, TokenType


@dataclass
class ParserError(Exception):
    position: int


@dataclass
class UnexpectedToken(ParserError):
    expected: str
    found: str

    def __str__(self) -> str:
        return f"Unexpected token at position {self.position}: expected {self.expected}, found {self.found}"


@dataclass
class UnexpectedEOF(ParserError):
    def __str__(self) -> str:
        return f"Unexpected end of input at position {self.position}"


@dataclass
class InvalidExpression(ParserError):
    message: str

    def __str__(self) -> str:
        return f"Invalid expression at position {self.position}: {self.message}"


TERM_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}

FACTOR_OPERATORS = {
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
}

UNARY_OPERATORS = {
    TokenType.PLUS: UnaryOperator.POS,
    TokenType.MINUS: UnaryOperator.NEG,
}

# parentheses, call arguments, exponents and chained assignments each open a level
MAX_NESTING_DEPTH = 100


def parse(tokens: list[Token]) -> Expression:
    """Build a single expression tree, requiring every token up to EOF to be consumed."""
    if not tokens:
        raise UnexpectedEOF(position=0)
    if tokens[-1].type is not TokenType.EOF:
        raise UnexpectedEOF(position=tokens[-1].position + tokens[-1].length)
    expr, i = _consume_assignment(tokens, 0, depth=0)
    end = _token_at(tokens, i)
    if end.type is not TokenType.EOF:
        raise UnexpectedToken(position=end.position, expected="end of input", found=end.describe())
    return expr


def _token_at(tokens: list[Token], i: int) -> Token:
    # past the end behaves as if the trailing EOF repeats
    return tokens[i] if i < len(tokens) else tokens[-1]


def _unexpected(token: Token, expected: str) -> ParserError:
    if token.type is TokenType.EOF:
        return UnexpectedEOF(position=token.position)
    return UnexpectedToken(position=token.position, expected=expected, found=token.describe())


def _expect(tokens: list[Token], i: int, token_type: TokenType, expected: str) -> int:
    token = _token_at(tokens, i)
    if token.type is not token_type:
        raise _unexpected(token, expected)
    return i + 1


def _descend(token: Token, depth: int) -> int:
    if depth >= MAX_NESTING_DEPTH:
        raise InvalidExpression(position=token.position, message="expression nested too deeply")
    return depth + 1


def _consume_assignment(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    target = _token_at(tokens, i)
    if target.type is TokenType.IDENTIFIER and _token_at(tokens, i + 1).type is TokenType.EQUAL:
        value, i = _consume_assignment(tokens, i + 2, _descend(target, depth))
        return Assignment(name=target.lexeme, value=value), i
    return _consume_expression(tokens, i, depth)


def _consume_expression(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    left, i = _consume_term(tokens, i, depth)
    while _token_at(tokens, i).type in TERM_OPERATORS:
        operator = TERM_OPERATORS[_token_at(tokens, i).type]
        right, i = _consume_term(tokens, i + 1, depth)
        left = BinaryOperation(operator=operator, left=left, right=right)
    return left, i


def _consume_term(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    left, i = _consume_factor(tokens, i, depth)
    while _token_at(tokens, i).type in FACTOR_OPERATORS:
        operator = FACTOR_OPERATORS[_token_at(tokens, i).type]
        right, i = _consume_factor(tokens, i + 1, depth)
        left = BinaryOperation(operator=operator, left=left, right=right)
    return left, i


def _consume_factor(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    return _consume_power(tokens, i, depth)


def _consume_power(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    base, i = _consume_unary(tokens, i, depth)
    caret = _token_at(tokens, i)
    if caret.type is TokenType.CARET:
        # recursing into power, not unary, makes 2^3^2 == 2^(3^2)
        exponent, i = _consume_power(tokens, i + 1, _descend(caret, depth))
        return BinaryOperation(operator=BinaryOperator.POW, left=base, right=exponent), i
    return base, i


def _consume_unary(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    operator = UNARY_OPERATORS.get(_token_at(tokens, i).type)
    if operator is None:
        return _consume_postfix(tokens, i, depth)
    operand, i = _consume_postfix(tokens, i + 1, depth)
    return UnaryOperation(operator=operator, operand=operand), i


def _consume_postfix(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    expr, i = _consume_primary(tokens, i, depth)
    while _token_at(tokens, i).type is TokenType.EXCLAMATION:
        expr = PostfixOperation(operand=expr, operator=PostfixOperator.FACTORIAL)
        i += 1
    return expr, i


def _consume_primary(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    first = _token_at(tokens, i)
    if first.type is TokenType.NUMBER:
        return Number(first.value if first.value is not None else float(first.lexeme)), i + 1
    elif first.type is TokenType.IDENTIFIER:
        if _token_at(tokens, i + 1).type is TokenType.BRACKET_OPEN:
            return _consume_function_call(tokens, i, depth)
        return Variable(first.lexeme), i + 1
    elif first.type is TokenType.BRACKET_OPEN:
        expr, i = _consume_expression(tokens, i + 1, _descend(first, depth))
        i = _expect(tokens, i, TokenType.BRACKET_CLOSE, expected="')'")
        return expr, i
    else:
        raise _unexpected(first, expected="number, variable, function call or '('")


def _consume_function_call(tokens: list[Token], i: int, depth: int) -> tuple[Expression, int]:
    name_token = tokens[i]
    function = Function.from_name(name_token.lexeme)
    if function is None:
        raise InvalidExpression(position=name_token.position, message=f"Unknown function {name_token.lexeme!r}")

    depth = _descend(name_token, depth)
    i = _expect(tokens, i + 1, TokenType.BRACKET_OPEN, expected="'('")
    args: list[Expression] = []
    if _token_at(tokens, i).type is not TokenType.BRACKET_CLOSE:
        while True:
            arg, i = _consume_expression(tokens, i, depth)
            args.append(arg)
            if _token_at(tokens, i).type is TokenType.BRACKET_CLOSE:
                break
            i = _expect(tokens, i, TokenType.COMMA, expected="',' or ')'")
    i = _expect(tokens, i, TokenType.BRACKET_CLOSE, expected="')'")
    return FunctionCall(function=function, args=args), i

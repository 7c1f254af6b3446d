from typing import Type

import pytest

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
from matheval.parser import (
    MAX_NESTING_DEPTH,
    InvalidExpression,
    ParserError,
    UnexpectedEOF,
    UnexpectedToken,
    parse,
)
from matheval.tokenizer import Token, TokenType, tokenize


@pytest.mark.parametrize(
    "code, expected_ast",
    [
        pytest.param("42", Number(42.0)),
        pytest.param("x", Variable("x")),
        pytest.param(
            "2 + 3 * 4",
            BinaryOperation(
                BinaryOperator.ADD,
                Number(2.0),
                BinaryOperation(BinaryOperator.MUL, Number(3.0), Number(4.0)),
            ),
        ),
        pytest.param(
            "10 - 4 - 3",
            BinaryOperation(
                BinaryOperator.SUB,
                BinaryOperation(BinaryOperator.SUB, Number(10.0), Number(4.0)),
                Number(3.0),
            ),
        ),
        pytest.param(
            "8 / 4 * 2",
            BinaryOperation(
                BinaryOperator.MUL,
                BinaryOperation(BinaryOperator.DIV, Number(8.0), Number(4.0)),
                Number(2.0),
            ),
        ),
        pytest.param(
            "2^3^2",
            BinaryOperation(
                BinaryOperator.POW,
                Number(2.0),
                BinaryOperation(BinaryOperator.POW, Number(3.0), Number(2.0)),
            ),
        ),
        pytest.param(
            "-2^2",
            BinaryOperation(BinaryOperator.POW, UnaryOperation(UnaryOperator.NEG, Number(2.0)), Number(2.0)),
        ),
        pytest.param(
            "-x!",
            UnaryOperation(UnaryOperator.NEG, PostfixOperation(Variable("x"), PostfixOperator.FACTORIAL)),
        ),
        pytest.param(
            "3!!",
            PostfixOperation(PostfixOperation(Number(3.0), PostfixOperator.FACTORIAL), PostfixOperator.FACTORIAL),
        ),
        pytest.param("+(1)", UnaryOperation(UnaryOperator.POS, Number(1.0))),
        pytest.param("SqRt(4)", FunctionCall(Function.SQRT, [Number(4.0)])),
        pytest.param("max()", FunctionCall(Function.MAX, [])),
        pytest.param(
            "min(1, x + 1)",
            FunctionCall(
                Function.MIN,
                [Number(1.0), BinaryOperation(BinaryOperator.ADD, Variable("x"), Number(1.0))],
            ),
        ),
        pytest.param("sin", Variable("sin")),
        pytest.param("a = b = 2", Assignment("a", Assignment("b", Number(2.0)))),
        pytest.param(
            "x = x + 1",
            Assignment("x", BinaryOperation(BinaryOperator.ADD, Variable("x"), Number(1.0))),
        ),
    ],
)
def test_parse(code: str, expected_ast: Expression) -> None:
    assert parse(tokenize(code)) == expected_ast


@pytest.mark.parametrize(
    "code, error_type, position",
    [
        pytest.param("", UnexpectedEOF, 0),
        pytest.param("2 + * 3", UnexpectedToken, 4),
        pytest.param("5 /", UnexpectedEOF, 3),
        pytest.param("2 3", UnexpectedToken, 2),
        pytest.param("(2 + 3", UnexpectedEOF, 6),
        pytest.param("(2 + 3))", UnexpectedToken, 7),
        pytest.param("--1", UnexpectedToken, 1),
        pytest.param("max(1 2)", UnexpectedToken, 6),
        pytest.param("max(1,)", UnexpectedToken, 6),
        pytest.param("(x = 1)", UnexpectedToken, 3),
        pytest.param("x =", UnexpectedEOF, 3),
        pytest.param("= 1", UnexpectedToken, 0),
        pytest.param("2 = 1", UnexpectedToken, 2),
        pytest.param("foo(1)", InvalidExpression, 0),
        pytest.param("1 + bar()", InvalidExpression, 4),
    ],
)
def test_parse_errors(code: str, error_type: Type[ParserError], position: int) -> None:
    with pytest.raises(error_type) as exc_info:
        parse(tokenize(code))
    assert exc_info.value.position == position


def test_trailing_tokens_message() -> None:
    with pytest.raises(UnexpectedToken) as exc_info:
        parse(tokenize("2 3"))
    assert exc_info.value.expected == "end of input"
    assert exc_info.value.found == "'3'"
    assert str(exc_info.value) == "Unexpected token at position 2: expected end of input, found '3'"


def test_unknown_function_message() -> None:
    with pytest.raises(InvalidExpression) as exc_info:
        parse(tokenize("foo(1)"))
    assert str(exc_info.value) == "Invalid expression at position 0: Unknown function 'foo'"


def test_empty_token_list() -> None:
    with pytest.raises(UnexpectedEOF):
        parse([])


def test_token_list_without_eof() -> None:
    tokens = [Token(TokenType.NUMBER, "5", 0, 1, 5.0), Token(TokenType.EXCLAMATION, "!", 1, 1)]
    with pytest.raises(UnexpectedEOF) as exc_info:
        parse(tokens)
    assert exc_info.value.position == 2


def test_nesting_at_the_limit_parses() -> None:
    depth = MAX_NESTING_DEPTH
    assert parse(tokenize("(" * depth + "1" + ")" * depth)) == Number(1.0)


@pytest.mark.parametrize(
    "code, position",
    [
        pytest.param("(" * 101 + "1" + ")" * 101, 100),
        pytest.param("(" * 2000 + "1" + ")" * 2000, 100),
        pytest.param("^".join(["1"] * 200), 201),
        pytest.param("abs(" * 101 + "1" + ")" * 101, 400),
        pytest.param("a=" * 101 + "1", 200),
    ],
)
def test_deep_nesting_is_rejected(code: str, position: int) -> None:
    with pytest.raises(InvalidExpression) as exc_info:
        parse(tokenize(code))
    assert exc_info.value.position == position
    assert exc_info.value.message == "expression nested too deeply"

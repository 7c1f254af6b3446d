import math
import threading

import pytest

from matheval.context import AngleMode, Context
from matheval.session import EvalRequest, EvalResult, Session


def test_successful_evaluation() -> None:
    session = Session()
    result = session.evaluate(EvalRequest(expression="2 + 3 * 4"))
    assert result == EvalResult(success=True, result=14.0)
    assert result.to_dict() == {"success": True, "result": 14.0, "error": None}


def test_accepts_plain_strings() -> None:
    assert Session().evaluate("2^3^2").result == 512.0


@pytest.mark.parametrize(
    "code, error, position",
    [
        pytest.param("2 @ 3", "Lexing error: Unexpected character encountered: '@' at position 2", 2),
        pytest.param("2 * .", "Lexing error: Invalid number format: '.'", 4),
        pytest.param("5 /", "Parsing error: Unexpected end of input at position 3", 3),
        pytest.param("foo(1)", "Parsing error: Invalid expression at position 0: Unknown function 'foo'", 0),
        pytest.param("1 / 0", "Evaluation error: Division by zero", None),
        pytest.param("y", "Evaluation error: Undefined variable encountered: 'y'", None),
        pytest.param("sqrt(-1)", "Evaluation error: Mathematical error: sqrt of negative number", None),
    ],
)
def test_failed_evaluation(code: str, error: str, position: int | None) -> None:
    result = Session().evaluate(code)
    assert not result.success
    assert result.result is None
    assert result.error == error
    assert result.error_position == position
    assert result.to_dict() == {"success": False, "result": None, "error": error}


def test_variables_persist_across_calls() -> None:
    session = Session()
    session.evaluate("x = 5")
    assert session.evaluate("x + 3").result == 8.0
    session.evaluate("x = 1")
    assert session.evaluate("x").result == 1.0


def test_get_variables_is_sorted() -> None:
    session = Session()
    session.evaluate("b = 2")
    session.evaluate("a = 1")
    assert session.get_variables() == [
        ("E", math.e),
        ("PI", math.pi),
        ("a", 1.0),
        ("ans", 1.0),
        ("b", 2.0),
    ]
    assert session.variable_names() == ["E", "PI", "a", "ans", "b"]


def test_failure_leaves_variables_unchanged() -> None:
    session = Session()
    session.evaluate("x = 2")
    before = session.get_variables()
    assert not session.evaluate("x = 1 / 0").success
    assert not session.evaluate("x = ").success
    assert session.get_variables() == before


def test_angle_mode() -> None:
    session = Session()
    assert session.get_angle_mode() == "deg"
    assert session.evaluate("sin(90)").result == pytest.approx(1.0)
    session.set_angle_mode("rad")
    assert session.get_angle_mode() == "rad"
    assert session.evaluate("sin(PI / 2)").result == pytest.approx(1.0)
    session.set_angle_mode("grad")
    assert session.evaluate("sin(100)").result == pytest.approx(1.0)


def test_invalid_angle_mode() -> None:
    session = Session()
    with pytest.raises(ValueError, match="Invalid angle mode 'turns'"):
        session.set_angle_mode("turns")
    assert session.get_angle_mode() == "deg"


def test_uses_given_context() -> None:
    context = Context(angle_mode=AngleMode.RADIANS)
    session = Session(context)
    session.evaluate("z = 4")
    assert context.get("z") == 4.0
    assert session.get_angle_mode() == "rad"


def test_concurrent_updates_are_serialized() -> None:
    session = Session()
    session.evaluate("counter = 0")

    def increment() -> None:
        for _ in range(200):
            session.evaluate("counter = counter + 1")

    threads = [threading.Thread(target=increment) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert session.evaluate("counter").result == 1600.0


def test_long_sum() -> None:
    result = Session().evaluate("+".join(["1"] * 2000))
    assert result == EvalResult(success=True, result=2000.0)


def test_deep_nesting_is_a_parsing_error() -> None:
    result = Session().evaluate("(" * 200 + "1" + ")" * 200)
    assert result.error == "Parsing error: Invalid expression at position 100: expression nested too deeply"
    assert result.error_position == 100

"""Evaluation errors.

Shared by the evaluator and the built-in function library. Tokenizer and parser
errors live next to the code that raises them.
"""

from dataclasses import dataclass


@dataclass
class EvaluationError(Exception):
    pass


@dataclass
class UndefinedVariable(EvaluationError):
    name: str

    def __str__(self) -> str:
        return f"Undefined variable encountered: {self.name!r}"


@dataclass
class DivisionByZero(EvaluationError):
    def __str__(self) -> str:
        return "Division by zero"


@dataclass
class InvalidArguments(EvaluationError):
    errmsg: str

    def __str__(self) -> str:
        return f"Invalid arguments: {self.errmsg}"


@dataclass
class MathError(EvaluationError):
    errmsg: str

    def __str__(self) -> str:
        return f"Mathematical error: {self.errmsg}"

import enum
from dataclasses import dataclass
from typing import Optional

from matheval.utils import PrintableEnum


class BinaryOperator(PrintableEnum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    POW = enum.auto()


class UnaryOperator(PrintableEnum):
    NEG = enum.auto()
    POS = enum.auto()


class PostfixOperator(PrintableEnum):
    FACTORIAL = enum.auto()


class Function(PrintableEnum):
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    LOG = "log"
    LN = "ln"
    EXP = "exp"
    SQRT = "sqrt"
    ABS = "abs"
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"
    POW = "pow"
    MAX = "max"
    MIN = "min"

    @classmethod
    def from_name(cls, name: str) -> Optional["Function"]:
        """Case-insensitive lookup, ``None`` for names outside the table."""
        try:
            return cls(name.lower())
        except ValueError:
            return None


@dataclass
class Number:
    value: float


@dataclass
class Variable:
    name: str


@dataclass
class BinaryOperation:
    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


@dataclass
class UnaryOperation:
    operator: UnaryOperator
    operand: "Expression"


@dataclass
class PostfixOperation:
    operand: "Expression"
    operator: PostfixOperator


@dataclass
class FunctionCall:
    function: Function
    args: list["Expression"]


@dataclass
class Assignment:
    name: str
    value: "Expression"


Expression = Number | Variable | BinaryOperation | UnaryOperation | PostfixOperation | FunctionCall | Assignment

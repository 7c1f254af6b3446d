import operator
from typing import Callable

from matheval.builtins import BUILTIN_FUNCS, factorial, power
from matheval.context import Context
from matheval.errors import DivisionByZero, UndefinedVariable
from matheval.nodes import (
    Assignment,
    BinaryOperation,
    BinaryOperator,
    Expression,
    FunctionCall,
    Number,
    PostfixOperation,
    PostfixOperator,
    UnaryOperation,
    UnaryOperator,
    Variable,
)

UnaryOperationImpl = Callable[[float], float]
BinaryOperationImpl = Callable[[float, float], float]


def evaluate(expression: Expression, context: Context) -> float:
    """Evaluate a whole line and remember the result as ``ans``."""
    result = evaluate_expression(expression, context)
    context.set_ans(result)
    return result


def evaluate_expression(expression: Expression, context: Context) -> float:
    if isinstance(expression, Number):
        return expression.value
    elif isinstance(expression, Variable):
        value = context.get(expression.name)
        if value is None:
            raise UndefinedVariable(expression.name)
        return value
    elif isinstance(expression, BinaryOperation):
        return _evaluate_binary_chain(expression, context)
    elif isinstance(expression, UnaryOperation):
        operand = evaluate_expression(expression.operand, context)
        return unary_impls[expression.operator](operand)
    elif isinstance(expression, PostfixOperation):
        return _evaluate_postfix_chain(expression, context)
    elif isinstance(expression, FunctionCall):
        args = [evaluate_expression(arg, context) for arg in expression.args]
        return BUILTIN_FUNCS[expression.function](args, context.get_angle_mode())
    elif isinstance(expression, Assignment):
        value = evaluate_expression(expression.value, context)
        context.set(expression.name, value)
        return value
    else:
        raise TypeError(f"Unexpected expression type: {expression!r}")


def _evaluate_binary_chain(expression: BinaryOperation, context: Context) -> float:
    # left-deep chains like 1 + 2 + ... + n are folded in a loop, not by recursion
    chain: list[BinaryOperation] = []
    node: Expression = expression
    while isinstance(node, BinaryOperation):
        chain.append(node)
        node = node.left
    result = evaluate_expression(node, context)
    for operation in reversed(chain):
        right_res = evaluate_expression(operation.right, context)
        result = binary_impls[operation.operator](result, right_res)
    return result


def _evaluate_postfix_chain(expression: PostfixOperation, context: Context) -> float:
    chain: list[PostfixOperation] = []
    node: Expression = expression
    while isinstance(node, PostfixOperation):
        chain.append(node)
        node = node.operand
    result = evaluate_expression(node, context)
    for operation in reversed(chain):
        result = postfix_impls[operation.operator](result)
    return result


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        raise DivisionByZero()
    return a / b


binary_impls: dict[BinaryOperator, BinaryOperationImpl] = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUB: operator.sub,
    BinaryOperator.MUL: operator.mul,
    BinaryOperator.DIV: _divide,
    BinaryOperator.POW: power,
}

unary_impls: dict[UnaryOperator, UnaryOperationImpl] = {
    UnaryOperator.NEG: operator.neg,
    UnaryOperator.POS: operator.pos,
}

postfix_impls: dict[PostfixOperator, UnaryOperationImpl] = {
    PostfixOperator.FACTORIAL: factorial,
}

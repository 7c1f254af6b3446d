import decimal
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from matheval.context import AngleMode
from matheval.errors import InvalidArguments, MathError
from matheval.nodes import Function


@dataclass
class BuiltinFunc:
    function: Function
    arity: Optional[int]  # None: variadic, at least one argument
    fn: Callable[..., float]
    angle_input: bool = False
    angle_output: bool = False

    @property
    def name(self) -> str:
        return self.function.value

    def __call__(self, args: Sequence[float], angle_mode: AngleMode) -> float:
        self._check_arity(args)
        if self.angle_input:
            args = [angle_mode.to_radians(arg) for arg in args]
        try:
            result = self.fn(*args)
        except OverflowError:
            raise MathError(f"result of {self.name} is too large") from None
        except ValueError:
            raise MathError(f"{self.name} is undefined for the given argument") from None
        if self.angle_output:
            result = angle_mode.from_radians(result)
        return result

    def _check_arity(self, args: Sequence[float]) -> None:
        if self.arity is None:
            if not args:
                raise InvalidArguments(f"{self.name} expects at least 1 argument, got 0")
        elif len(args) != self.arity:
            raise InvalidArguments(f"{self.name} expects {self.arity} argument(s), got {len(args)}")


BUILTIN_FUNCS: dict[Function, BuiltinFunc] = dict()


def register_builtin_func(
    function: Function, arity: Optional[int] = 1, angle_input: bool = False, angle_output: bool = False
):
    def decorator(fn: Callable[..., float]) -> Callable[..., float]:
        BUILTIN_FUNCS[function] = BuiltinFunc(
            function=function, arity=arity, fn=fn, angle_input=angle_input, angle_output=angle_output
        )
        return fn

    return decorator


def factorial(value: float) -> float:
    if value < 0 or not value.is_integer():
        raise MathError("factorial requires a non-negative integer")
    if value > 20:
        # 21! no longer fits a float exactly
        raise MathError("factorial too large")
    return float(math.factorial(int(value)))


def power(base: float, exponent: float) -> float:
    if base < 0 and math.isfinite(exponent) and not exponent.is_integer():
        raise MathError("negative base with a fractional exponent")
    if base == 0 and exponent < 0:
        raise MathError("zero raised to a negative power")
    try:
        return math.pow(base, exponent)
    except OverflowError:
        raise MathError("result of power is too large") from None


@register_builtin_func(Function.SIN, angle_input=True)
def sin_(x: float) -> float:
    return math.sin(x)


@register_builtin_func(Function.COS, angle_input=True)
def cos_(x: float) -> float:
    return math.cos(x)


@register_builtin_func(Function.TAN, angle_input=True)
def tan_(x: float) -> float:
    return math.tan(x)


@register_builtin_func(Function.ASIN, angle_output=True)
def asin_(x: float) -> float:
    if not -1 <= x <= 1:
        raise MathError("asin requires an argument in [-1, 1]")
    return math.asin(x)


@register_builtin_func(Function.ACOS, angle_output=True)
def acos_(x: float) -> float:
    if not -1 <= x <= 1:
        raise MathError("acos requires an argument in [-1, 1]")
    return math.acos(x)


@register_builtin_func(Function.ATAN, angle_output=True)
def atan_(x: float) -> float:
    return math.atan(x)


@register_builtin_func(Function.LOG)
def log_(x: float) -> float:
    if x <= 0:
        raise MathError("log requires a positive argument")
    return math.log10(x)


@register_builtin_func(Function.LN)
def ln_(x: float) -> float:
    if x <= 0:
        raise MathError("ln requires a positive argument")
    return math.log(x)


@register_builtin_func(Function.EXP)
def exp_(x: float) -> float:
    return math.exp(x)


@register_builtin_func(Function.SQRT)
def sqrt_(x: float) -> float:
    if x < 0:
        raise MathError("sqrt of negative number")
    return math.sqrt(x)


@register_builtin_func(Function.ABS)
def abs_(x: float) -> float:
    return abs(x)


@register_builtin_func(Function.FLOOR)
def floor_(x: float) -> float:
    if not math.isfinite(x):
        return x
    return float(math.floor(x))


@register_builtin_func(Function.CEIL)
def ceil_(x: float) -> float:
    if not math.isfinite(x):
        return x
    return float(math.ceil(x))


@register_builtin_func(Function.ROUND)
def round_(x: float) -> float:
    """Round half away from zero, unlike the builtin ``round``."""
    if not math.isfinite(x):
        return x
    return float(decimal.Decimal(x).to_integral_value(rounding=decimal.ROUND_HALF_UP))


@register_builtin_func(Function.POW, arity=2)
def pow_(base: float, exponent: float) -> float:
    return power(base, exponent)


@register_builtin_func(Function.MAX, arity=None)
def max_(*args: float) -> float:
    if any(math.isnan(arg) for arg in args):
        return math.nan
    return max(args)


@register_builtin_func(Function.MIN, arity=None)
def min_(*args: float) -> float:
    if any(math.isnan(arg) for arg in args):
        return math.nan
    return min(args)

import math
from dataclasses import dataclass, field
from typing import Optional

from matheval.utils import PrintableEnum

CONSTANTS = {
    "PI": math.pi,
    "E": math.e,
}

ANS = "ans"


class AngleMode(PrintableEnum):
    DEGREES = "deg"
    RADIANS = "rad"
    GRADIANS = "grad"

    @classmethod
    def from_token(cls, token: str) -> "AngleMode":
        try:
            return cls(token)
        except ValueError:
            valid = ", ".join(repr(mode.value) for mode in cls)
            raise ValueError(f"Invalid angle mode {token!r}, expected one of {valid}") from None

    def to_radians(self, angle: float) -> float:
        return angle * _RADIANS_PER_UNIT[self]

    def from_radians(self, angle: float) -> float:
        return angle / _RADIANS_PER_UNIT[self]


_RADIANS_PER_UNIT = {
    AngleMode.DEGREES: math.pi / 180,
    AngleMode.RADIANS: 1.0,
    AngleMode.GRADIANS: math.pi / 200,
}


def _default_variables() -> dict[str, float]:
    return dict(CONSTANTS)


@dataclass
class Context:
    """Variable bindings and angle mode shared by consecutive evaluations.

    Names are case-sensitive; constants are ordinary bindings and can be shadowed.
    """

    variables: dict[str, float] = field(default_factory=_default_variables)
    angle_mode: AngleMode = AngleMode.DEGREES

    def get(self, name: str) -> Optional[float]:
        return self.variables.get(name)

    def set(self, name: str, value: float) -> None:
        self.variables[name] = value

    def set_ans(self, value: float) -> None:
        self.set(ANS, value)

    def get_variables(self) -> dict[str, float]:
        return dict(self.variables)

    def get_angle_mode(self) -> AngleMode:
        return self.angle_mode

    def set_angle_mode(self, mode: AngleMode) -> None:
        self.angle_mode = mode

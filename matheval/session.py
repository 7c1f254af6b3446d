"""Thread-safe front end over the tokenize -> parse -> evaluate pipeline.

A ``Session`` owns one ``Context`` and serializes every access to it, so a UI
thread and background callers can share variables and the angle mode.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional, Union

from matheval.context import AngleMode, Context
from matheval.errors import EvaluationError
from matheval.parser import ParserError, parse
from matheval.runtime import evaluate
from matheval.tokenizer import TokenizerError, tokenize

logger = logging.getLogger(__name__)


def calculate(code: str, context: Context) -> float:
    return evaluate(parse(tokenize(code)), context)


@dataclass
class EvalRequest:
    expression: str


@dataclass
class EvalResult:
    success: bool
    result: Optional[float] = None
    error: Optional[str] = None
    error_position: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "result": self.result, "error": self.error}


class Session:
    def __init__(self, context: Optional[Context] = None) -> None:
        self._context = context if context is not None else Context()
        self._lock = threading.Lock()

    def evaluate(self, request: Union[EvalRequest, str]) -> EvalResult:
        code = request.expression if isinstance(request, EvalRequest) else request
        with self._lock:
            logger.debug("Evaluating %r", code)
            try:
                tokens = tokenize(code)
            except TokenizerError as e:
                return self._failure(code, f"Lexing error: {e}", e.position)

            try:
                ast = parse(tokens)
            except ParserError as e:
                return self._failure(code, f"Parsing error: {e}", e.position)

            try:
                result = evaluate(ast, self._context)
            except EvaluationError as e:
                return self._failure(code, f"Evaluation error: {e}", None)

        logger.debug("%r = %r", code, result)
        return EvalResult(success=True, result=result)

    def get_variables(self) -> list[tuple[str, float]]:
        with self._lock:
            return sorted(self._context.get_variables().items())

    def variable_names(self) -> list[str]:
        return [name for name, _ in self.get_variables()]

    def set_angle_mode(self, mode: str) -> None:
        angle_mode = AngleMode.from_token(mode)
        with self._lock:
            self._context.set_angle_mode(angle_mode)
        logger.info("Angle mode set to %s", angle_mode)

    def get_angle_mode(self) -> str:
        with self._lock:
            return self._context.get_angle_mode().value

    def _failure(self, code: str, errmsg: str, position: Optional[int]) -> EvalResult:
        logger.info("Evaluation of %r failed: %s", code, errmsg)
        return EvalResult(success=False, error=errmsg, error_position=position)

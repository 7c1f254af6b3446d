import logging
import re
from typing import Callable, Iterable, Iterator, Optional, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import FileHistory

from matheval.config import ReplConfig, load_config
from matheval.nodes import Function
from matheval.session import Session
from matheval.utils import format_error_context, format_number

logger = logging.getLogger(__name__)

FUNCTION_NAMES = [f.value for f in Function]
COMMANDS = ["help", "exit", "quit", "vars", "deg", "rad", "grad", "mode"]

ANGLE_MODE_NAMES = {
    "deg": "Degrees (DEG)",
    "rad": "Radians (RAD)",
    "grad": "Gradians (GRAD)",
}

BANNER = "\n".join(
    [
        "=== matheval REPL ===",
        "Type 'exit' or 'quit' to leave the REPL.",
        "Type 'help' for available functions.",
        "Use Up/Down to navigate through history, Tab for autocompletion.",
    ]
)

HELP_TEXT = "\n".join(
    [
        "Available functions:",
        "  Trigonometric: sin(x), cos(x), tan(x), asin(x), acos(x), atan(x)",
        "  Logarithmic: ln(x), log(x)",
        "  Power & roots: sqrt(x), exp(x), pow(x, y)",
        "  Rounding: floor(x), ceil(x), round(x)",
        "  Other: abs(x), max(...), min(...)",
        "  Factorial: x!",
        "",
        "Constants: PI, E (last result: ans)",
        "Operators: +, -, *, /, ^, name = value",
        "",
        "Commands:",
        "  deg   - Set angle mode to degrees (default)",
        "  rad   - Set angle mode to radians",
        "  grad  - Set angle mode to gradians",
        "  mode  - Show current angle mode",
        "  vars  - List all defined variables",
        "  help  - Show this help",
        "  exit  - Exit the REPL",
    ]
)

_WORD_AT_END = re.compile(r"\w*$")


def _current_word(text: str) -> str:
    match = _WORD_AT_END.search(text)
    return match.group() if match else ""


class CalcCompleter(Completer):
    """Completes function names, variable names and, at the start of a line, commands.

    Variable names are read through ``variable_names`` on every request; the
    completer never writes to the session.
    """

    def __init__(self, variable_names: Callable[[], Iterable[str]]) -> None:
        self.variable_names = variable_names

    def candidates(self, text: str) -> list[str]:
        word = _current_word(text)
        if not word:
            return []
        names = FUNCTION_NAMES + list(self.variable_names())
        if len(word) == len(text):
            names += COMMANDS
        result: list[str] = []
        for name in names:
            if name.startswith(word) and name not in result:
                result.append(name)
        return result

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterator[Completion]:
        text = document.text_before_cursor
        word = _current_word(text)
        for candidate in self.candidates(text):
            yield Completion(candidate, start_position=-len(word))


class CalcAutoSuggest(AutoSuggest):
    """Hints the rest of the first name matching the word being typed."""

    def __init__(self, completer: CalcCompleter) -> None:
        self.completer = completer

    def get_suggestion(self, buffer, document: Document) -> Optional[Suggestion]:
        if not document.is_cursor_at_the_end:
            return None
        text = document.text
        word = _current_word(text)
        for candidate in self.completer.candidates(text):
            if candidate != word:
                return Suggestion(candidate[len(word) :])
        return None


class Repl:
    def __init__(self, session: Session) -> None:
        self.session = session

    def handle_line(self, line: str) -> Optional[str]:
        """Run one submitted line and return the text to show.

        Raises ``EOFError`` on ``exit``/``quit``.
        """
        code = line.strip()
        if not code:
            return None
        if code in ("exit", "quit"):
            raise EOFError()
        elif code == "help":
            return HELP_TEXT
        elif code == "vars":
            return self._list_vars()
        elif code in ANGLE_MODE_NAMES:
            self.session.set_angle_mode(code)
            return f"Angle mode set to: {ANGLE_MODE_NAMES[code]}"
        elif code == "mode":
            return f"Current angle mode: {ANGLE_MODE_NAMES[self.session.get_angle_mode()]}"

        result = self.session.evaluate(code)
        if result.success and result.result is not None:
            return f"= {format_number(result.result)}"
        lines = [result.error or "Unknown error"]
        if result.error_position is not None:
            lines.append(format_error_context(code, result.error_position))
        return "\n".join(lines)

    def _list_vars(self) -> str:
        variables = self.session.get_variables()
        if not variables:
            return "No variables defined."
        return "\n".join(["Defined variables:"] + [f"  {name} = {format_number(value)}" for name, value in variables])


def run(config: ReplConfig) -> None:
    session = Session()
    session.set_angle_mode(config.angle_mode.value)
    repl = Repl(session)
    completer = CalcCompleter(session.variable_names)
    prompt_session: PromptSession[str] = PromptSession(
        history=FileHistory(config.history_file),
        completer=completer,
        auto_suggest=CalcAutoSuggest(completer),
    )
    logger.debug("History file: %s", config.history_file)

    print(BANNER)
    while True:
        try:
            line = prompt_session.prompt("> ")
        except KeyboardInterrupt:
            print("Use 'exit' or 'quit' to leave the REPL.")
            continue
        except EOFError:
            break

        try:
            output = repl.handle_line(line)
        except EOFError:
            break
        if output is not None:
            print(output)

    print("Goodbye")


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = load_config(argv)
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    run(config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

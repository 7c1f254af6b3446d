import enum
import re
import string
from dataclasses import dataclass
from typing import Optional

from matheval.utils import PrintableEnum


@dataclass
class TokenizerError(Exception):
    position: int


@dataclass
class UnexpectedCharacter(TokenizerError):
    char: str

    def __str__(self) -> str:
        return f"Unexpected character encountered: {self.char!r} at position {self.position}"


@dataclass
class InvalidNumber(TokenizerError):
    text: str

    def __str__(self) -> str:
        return f"Invalid number format: {self.text!r}"


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    CARET = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    EXCLAMATION = enum.auto()
    COMMA = enum.auto()
    EQUAL = enum.auto()
    IDENTIFIER = enum.auto()
    EOF = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    position: int
    length: int
    value: Optional[float] = None

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"

    def describe(self) -> str:
        if self.type is TokenType.EOF:
            return "end of input"
        return repr(self.lexeme)


def _is_valid_in_number(s: str) -> bool:
    return s in string.digits or s == "."


def _is_valid_in_identifier(s: str) -> bool:
    return s.isalnum() or s == "_"


SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
    "!": TokenType.EXCLAMATION,
    ",": TokenType.COMMA,
    "=": TokenType.EQUAL,
}


def tokenize(code: str) -> list[Token]:
    """Split a line into tokens, always terminated by a single EOF token.

    Positions are character offsets into ``code``.
    """
    i = 0
    tokens: list[Token] = []
    while i < len(code):
        if _is_valid_in_number(code[i]):
            number_end_idx = i + 1
            seen_dot = code[i] == "."
            while number_end_idx < len(code) and _is_valid_in_number(code[number_end_idx]):
                if code[number_end_idx] == ".":
                    if seen_dot:
                        break
                    seen_dot = True
                number_end_idx += 1
            lexeme = code[i:number_end_idx]
            try:
                value = float(lexeme)
            except ValueError:
                raise InvalidNumber(position=i, text=lexeme) from None
            tokens.append(Token(TokenType.NUMBER, lexeme, position=i, length=len(lexeme), value=value))
            i = number_end_idx - 1  # to account for += 1 later
        elif code[i].isalpha():
            ident_end_idx = i + 1
            while ident_end_idx < len(code) and _is_valid_in_identifier(code[ident_end_idx]):
                ident_end_idx += 1
            lexeme = code[i:ident_end_idx]
            tokens.append(Token(TokenType.IDENTIFIER, lexeme, position=i, length=len(lexeme)))
            i = ident_end_idx - 1  # to account for += 1 later
        elif code[i] in SINGLE_CHAR_TOKENS:
            tokens.append(Token(SINGLE_CHAR_TOKENS[code[i]], code[i], position=i, length=1))
        elif code[i].isspace():
            pass
        else:
            raise UnexpectedCharacter(position=i, char=code[i])
        i += 1

    tokens.append(Token(TokenType.EOF, "", position=len(code), length=1))
    return tokens


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens if t.type is not TokenType.EOF)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)

    # 4 ^ 5 => 4^5, 5 ! => 5!, max(1 , 2) => max(1, 2)
    result = re.sub(r"\s+\^\s+", "^", result)
    result = re.sub(r"\s+!", "!", result)
    result = re.sub(r"\s+,", ",", result)
    # sin (x) => sin(x)
    result = re.sub(r"(\w)\s+\(", r"\1(", result)
    return result

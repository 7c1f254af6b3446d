import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def format_error_context(code: str, position: int) -> str:
    print_start_idx = max(0, position - 10)
    print_ellipsis_pre = print_start_idx > 0
    print_end_idx = min(len(code), position + 10)
    print_ellipsis_post = print_end_idx < len(code)
    return "\n".join(
        [
            (
                ("..." if print_ellipsis_pre else "")
                + f"{code[print_start_idx:print_end_idx]}"
                + ("..." if print_ellipsis_post else "")
            ),
            " " * (position - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
        ]
    )


def format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)

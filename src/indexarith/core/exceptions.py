from __future__ import annotations

from typing import Optional, Sequence


class IndexArithError(Exception):
    """Base class for indexarith-specific exceptions."""


class MissingArgument(IndexArithError, TypeError):
    def __init__(self, message: str = "missing argument in `normalize(x)`"):
        super().__init__(message)


class UnsupportedType(IndexArithError, TypeError):
    def __init__(self, value_type: type, message: Optional[str] = None):
        name = _type_name(value_type)
        if message is None:
            message = (
                f"unexpected object of type `{name}` in range expression; "
                f"register a rule with `indexarith.register_normalizer({name})` "
                "or protect the sub-expression with `$(...)`"
            )
        super().__init__(message)
        self.value_type = value_type


class UndefinedOperation(IndexArithError, TypeError):
    def __init__(self, operation: str, shapes: Sequence[str], detail: Optional[str] = None):
        kinds = ", ".join(shapes)
        message = f"`{operation}` is not defined for ({kinds})"
        if detail:
            message = f"{message}: {detail}"
        else:
            message = f"{message}; rewrite the expression or escape it with `$(...)`"
        super().__init__(message)
        self.operation = operation
        self.shapes = tuple(shapes)


class InvalidStretchAmount(IndexArithError, ValueError):
    pass


class InvalidShrinkAmount(IndexArithError, ValueError):
    pass


class InvalidRangeError(IndexArithError, ValueError):
    pass


class IndexOverflowError(IndexArithError, OverflowError):
    pass


class ParseError(IndexArithError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        line_text: Optional[str] = None,
    ):
        detail = _format_location(line, column, line_text)
        super().__init__(f"{message}{detail}")
        self.line = line
        self.column = column
        self.line_text = line_text


class EvaluationError(IndexArithError, NameError):
    pass


def _type_name(value_type: type) -> str:
    module = getattr(value_type, "__module__", "builtins")
    qualname = getattr(value_type, "__qualname__", repr(value_type))
    if module in {"builtins", None}:
        return qualname
    return f"{module}.{qualname}"


def _format_location(
    line: Optional[int],
    column: Optional[int],
    line_text: Optional[str],
) -> str:
    if line is None and column is None:
        return ""
    location = []
    if line is not None:
        location.append(f"line {line}")
    if column is not None:
        location.append(f"col {column}")
    location_str = f" ({', '.join(location)})"
    if line_text is None or column is None or column < 1:
        return location_str
    caret = " " * (column - 1) + "^"
    return f"{location_str}\n  {line_text}\n  {caret}"

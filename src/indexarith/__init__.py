from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from .core.direction import backward, forward
from .core.evaluator import EvalConfig
from .core.exceptions import (
    EvaluationError,
    IndexArithError,
    IndexOverflowError,
    InvalidRangeError,
    InvalidShrinkAmount,
    InvalidStretchAmount,
    MissingArgument,
    ParseError,
    UndefinedOperation,
    UnsupportedType,
)
from .core.forms import (
    EMPTY_RANGE,
    LinearRange,
    MultiIndex,
    Region,
    Shape,
    multi_index,
    one_to,
    region,
    shape_of,
    to_int,
    unit_range,
)
from .core.normalize import is_canonical, normalize, register_normalizer
from .core.operators import (
    ShrinkBy,
    StretchBy,
    cap,
    first_last,
    first_step_last,
    minus,
    plus,
    ranges,
    shrink,
    stretch,
)
from .core.program import RangeExpression, evaluate, range_expr, reverse_range_expr

try:
    __version__ = _load_version("indexarith")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "LinearRange",
    "MultiIndex",
    "Region",
    "Shape",
    "EMPTY_RANGE",
    "multi_index",
    "region",
    "unit_range",
    "one_to",
    "shape_of",
    "to_int",
    "normalize",
    "register_normalizer",
    "is_canonical",
    "forward",
    "backward",
    "plus",
    "minus",
    "cap",
    "stretch",
    "shrink",
    "StretchBy",
    "ShrinkBy",
    "ranges",
    "first_last",
    "first_step_last",
    "RangeExpression",
    "EvalConfig",
    "evaluate",
    "range_expr",
    "reverse_range_expr",
    "IndexArithError",
    "MissingArgument",
    "UnsupportedType",
    "UndefinedOperation",
    "InvalidStretchAmount",
    "InvalidShrinkAmount",
    "InvalidRangeError",
    "IndexOverflowError",
    "ParseError",
    "EvaluationError",
    "__version__",
]

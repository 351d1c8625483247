from __future__ import annotations

import logging
import numbers
from typing import Any, Callable, Dict, Optional

import numpy as np

from .exceptions import MissingArgument, UnsupportedType
from .forms import CANONICAL_TYPES, LinearRange, MultiIndex, Region, to_int

logger = logging.getLogger(__name__)

Normalizer = Callable[[Any], Any]

# Rules are meant to be registered at import time, before concurrent use.
_NORMALIZERS: Dict[type, Normalizer] = {}
_DISPATCH_CACHE: Dict[type, Optional[Normalizer]] = {}


def register_normalizer(cls: type):
    """Decorator installing the normalization rule for ``cls`` and its subclasses.

    The rule must return one of the canonical forms (``int``,
    :class:`LinearRange`, :class:`MultiIndex`, :class:`Region`) or a tuple of
    integers.  Registering a rule for a type that already has one replaces it.
    """

    def decorator(func: Normalizer) -> Normalizer:
        if cls in _NORMALIZERS:
            logger.debug("replacing normalizer for %s", cls.__qualname__)
        _NORMALIZERS[cls] = func
        _DISPATCH_CACHE.clear()
        logger.debug("registered normalizer %s for %s", func.__name__, cls.__qualname__)
        return func

    return decorator


def _lookup(cls: type) -> Optional[Normalizer]:
    try:
        return _DISPATCH_CACHE[cls]
    except KeyError:
        pass
    rule: Optional[Normalizer] = None
    for base in cls.__mro__:
        if base in _NORMALIZERS:
            rule = _NORMALIZERS[base]
            break
    else:
        # Abstract bases such as ``numbers.Integral`` are not in the MRO of
        # the classes registered against them.
        for key, candidate in _NORMALIZERS.items():
            if issubclass(cls, key):
                rule = candidate
                break
    _DISPATCH_CACHE[cls] = rule
    return rule


def normalize(*args: Any) -> Any:
    """Reduce an index-like value to its canonical form.

    Integers become 64-bit ``int`` values, integer ranges become
    :class:`LinearRange`, and :class:`MultiIndex` / :class:`Region` values
    pass through unchanged.  Tuples of integers become tuples of ``int``
    and are only meaningful as per-dimension amounts.
    """
    if not args:
        raise MissingArgument()
    if len(args) > 1:
        raise TypeError(f"normalize() takes exactly one argument ({len(args)} given)")
    (x,) = args
    rule = _lookup(type(x))
    if rule is None:
        raise UnsupportedType(type(x))
    result = rule(x)
    if not _is_valid_result(result):
        raise UnsupportedType(
            type(x),
            f"normalizer for `{type(x).__name__}` returned `{type(result).__name__}`, "
            "which is not a canonical index form",
        )
    return result


def _is_valid_result(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, CANONICAL_TYPES):
        return True
    return isinstance(value, tuple) and all(
        isinstance(v, int) and not isinstance(v, bool) for v in value
    )


def is_canonical(value: Any) -> bool:
    return isinstance(value, CANONICAL_TYPES) and not isinstance(value, bool)


# Built-in rules ---------------------------------------------------------------


@register_normalizer(int)
def _normalize_int(x: int) -> int:
    return to_int(x)


@register_normalizer(np.integer)
def _normalize_numpy_integer(x: np.integer) -> int:
    return to_int(x)


@register_normalizer(numbers.Integral)
def _normalize_integral(x: numbers.Integral) -> int:
    return to_int(x)


@register_normalizer(tuple)
def _normalize_tuple(x: tuple) -> tuple:
    for item in x:
        if not isinstance(item, numbers.Integral):
            raise UnsupportedType(
                type(item),
                f"tuple amounts must hold integers only, found `{type(item).__name__}`",
            )
    return tuple(to_int(item) for item in x)


@register_normalizer(range)
def _normalize_range(x: range) -> LinearRange:
    return LinearRange.from_range(x)


@register_normalizer(LinearRange)
def _normalize_linear_range(x: LinearRange) -> LinearRange:
    return x


@register_normalizer(MultiIndex)
def _normalize_multi_index(x: MultiIndex) -> MultiIndex:
    return x


@register_normalizer(Region)
def _normalize_region(x: Region) -> Region:
    return x

"""Option merging across an instance lineage.

:func:`merge_options` is the single rule used everywhere options combine:
default policy beneath instance options, instance options beneath
``extend`` deltas, and the forced method beneath per-call options.

Merge rules (``base`` then ``override``):

* present scalar fields in ``override`` replace those in ``base``;
* ``headers`` are unioned, ``override`` winning on a name collision;
* ``query_params`` from ``override`` are unioned with ``base``'s when both
  are mappings, otherwise they replace ``base``'s outright; when
  ``override`` has none, ``base``'s are inherited.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fetchwrap.models import Options, OptionsLike


def as_options(value: OptionsLike = None, **kwargs: Any) -> Options:
    """Coerce *value* (and keyword options layered on top) into :class:`Options`."""
    if value is None:
        options = Options()
    elif isinstance(value, Options):
        options = value
    elif isinstance(value, Mapping):
        options = Options(**value)
    else:
        raise TypeError(f"Expected Options or a mapping, got {type(value).__name__}")
    if kwargs:
        options = merge_options(options, Options(**kwargs))
    return options


def merge_options(base: OptionsLike = None, override: OptionsLike = None) -> Options:
    """Combine *base* and *override* into a new :class:`Options`.

    Neither input is modified. Fields absent from both inputs are absent
    from the result.

    Args:
        base: Lower-priority options.
        override: Higher-priority options.

    Returns:
        A new frozen :class:`Options`.
    """
    left = as_options(base)
    right = as_options(override)

    merged = {**left.present(), **right.present()}

    if left.headers is not None or right.headers is not None:
        merged["headers"] = {**(left.headers or {}), **(right.headers or {})}

    if right.query_params is not None:
        if isinstance(left.query_params, Mapping) and isinstance(right.query_params, Mapping):
            merged["query_params"] = {**left.query_params, **right.query_params}
        else:
            merged["query_params"] = right.query_params
    elif left.query_params is not None:
        merged["query_params"] = left.query_params

    return Options(**merged)

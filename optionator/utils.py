# optionator/utils.py
"""
optionator.utils
----------------

Shared helpers used by the CLI and available for downstream consumers.
"""

import dataclasses
import importlib
from datetime import timedelta
from typing import Any

from .coerce import format_duration
from .metadata import is_record


def import_string(spec: str) -> Any:
    """Import an object from a ``"package.module:Name"`` string.

    The attribute part may be dotted (``"pkg.mod:Outer.Inner"``).

    Args:
        spec: Module path and attribute separated by a colon.

    Returns:
        The imported object.

    Raises:
        ValueError: If `spec` has no ``:`` separator.
        ImportError: If the module cannot be imported.
        AttributeError: If the attribute does not exist.

    Examples:
        >>> import_string("optionator.example:Server")
        <class 'optionator.example.Server'>
    """
    module_name, sep, attr_path = spec.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:Name', got {spec!r}")
    obj = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


def to_plain(value: Any) -> Any:
    """Recursively convert a record into JSON-friendly plain data.

    Records become dicts of their visible fields, timedeltas become duration
    strings (``"30s"``), containers are converted element-wise and other
    non-JSON objects fall back to ``repr()``.

    Examples:
        >>> to_plain(timedelta(seconds=90))
        '1m30s'
    """
    if is_record(value):
        return {
            f.name: to_plain(getattr(value, f.name, None))
            for f in dataclasses.fields(value)
            if not f.name.startswith("_")
        }
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_plain(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)

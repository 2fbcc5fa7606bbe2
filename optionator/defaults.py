# optionator/defaults.py
"""
optionator.defaults
-------------------

Recursive application of default annotations.

Nested records are handled depth-first: an absent nested record is allocated
with a no-argument call and defaulted before the parent looks at the field
itself. A field receives its default only while it still holds its zero
value, so running the pass twice is a no-op. A field declared with
``init=False`` that was never assigned counts as absent.
"""

import logging
from datetime import timedelta
from typing import Any, FrozenSet

from .coerce import find_coercer
from .config import AnnotationConfig, DEFAULT_CONFIG
from .exceptions import (
    AllocationError,
    DefaultValueError,
    InvalidTargetError,
    UnsupportedTypeError,
)
from .metadata import (
    describe,
    field_types,
    is_mutable_record,
    is_record,
    unwrap_optional,
)

log = logging.getLogger(__name__)

_EMPTY_CONTAINERS = (str, bytes, bytearray, list, tuple, dict, set, frozenset)


def is_zero(value: Any, static_type: Any = Any) -> bool:
    """
    Check whether `value` is the zero/empty value of its field.

    - ``Optional[...]`` fields are zero only when ``None``.
    - Records are zero when every one of their fields is zero.
    - Strings and containers are zero when empty; numbers when 0; bools when
      False; timedeltas when 0.
    - Any other non-None object (an opaque type) is never zero.
    """
    if value is None:
        return True
    _, optional = unwrap_optional(static_type)
    if optional:
        return False
    if is_record(value):
        hints = field_types(type(value))
        return all(is_zero(getattr(value, name, None), tp) for name, tp in hints.items())
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, timedelta):
        return value == timedelta(0)
    if isinstance(value, _EMPTY_CONTAINERS):
        return len(value) == 0
    return False


def apply_defaults(record: Any, config: AnnotationConfig = DEFAULT_CONFIG) -> None:
    """
    Apply default annotations to `record` in place, recursing into nested records.

    Args:
        record: A mutable dataclass instance.
        config: Annotation keys and unsupported-type policy.

    Raises:
        InvalidTargetError: If `record` (or a nested record) is not a mutable dataclass instance.
        AllocationError: If an absent nested record cannot be created.
        DefaultValueError: If a default annotation does not parse.
        UnsupportedTypeError: In strict mode, for an annotated field with no coercion rule.
    """
    if not is_mutable_record(record):
        raise InvalidTargetError(record)
    _apply(record, config, frozenset({type(record)}))


def _apply(record: Any, config: AnnotationConfig, active: FrozenSet[type]) -> None:
    record_type = type(record)
    log.debug(f"DEBUG [optionator.apply_defaults]: Applying defaults to {record_type.__qualname__}")
    for fd in describe(record_type, config):
        value = getattr(record, fd.name, None)

        nested_type = fd.record_type
        if nested_type is not None:
            if value is None:
                if nested_type in active:
                    # self-referencing type: allocating here would never terminate
                    log.debug(f"DEBUG [optionator.apply_defaults]: Not allocating recursive "
                              f"{nested_type.__qualname__} for field '{fd.name}'")
                    continue
                value = _allocate(fd.name, nested_type)
                setattr(record, fd.name, value)
            if not is_mutable_record(value):
                raise InvalidTargetError(value, f"nested record in field {fd.name} must be a mutable dataclass instance")
            _apply(value, config, active | {type(value)})

        if not fd.has_default or not is_zero(value, fd.type):
            continue

        coercer = find_coercer(fd.type)
        if coercer is None:
            if config.strict:
                raise UnsupportedTypeError(fd.type, fd.name)
            log.debug(f"DEBUG [optionator.apply_defaults]: Ignoring default {fd.default!r} on "
                      f"field '{fd.name}' of unsupported type {fd.type!r}")
            continue
        try:
            parsed = coercer(fd.default)
        except (ValueError, OverflowError) as e:
            raise DefaultValueError(fd.name, fd.default, e) from e
        setattr(record, fd.name, parsed)
        log.debug(f"DEBUG [optionator.apply_defaults]: Set default {fd.name} = {parsed!r}")


def _allocate(field_name: str, nested_type: type) -> Any:
    try:
        instance = nested_type()
    except TypeError as e:
        raise AllocationError(field_name, nested_type, e) from e
    log.debug(f"DEBUG [optionator.apply_defaults]: Allocated {nested_type.__qualname__} for field '{field_name}'")
    return instance


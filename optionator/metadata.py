# optionator/metadata.py
"""
optionator.metadata
-------------------

Field metadata extraction for record types (mutable dataclasses).

``describe()`` introspects a dataclass once and caches the ordered list of
``FieldDescriptor`` entries in a process-wide dict. Entries are immutable
tuples inserted under a lock with insert-once semantics, so concurrent callers
see either no entry or a complete one. The cache is never invalidated: class
shapes do not change at run time.
"""

import dataclasses
import functools
import logging
import sys
import threading
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .config import AnnotationConfig, DEFAULT_CONFIG
from .exceptions import InvalidTargetError

log = logging.getLogger(__name__)

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class FieldDescriptor:
    """Cached metadata for one visible field of a record type.

    Attributes:
        index: Position of the field in its declaring dataclass.
        name: Attribute name.
        default: Raw default annotation text, ``""`` when absent.
        required: True when the required annotation is ``"true"``.
        type: Resolved static type of the field.
    """

    index: int
    name: str
    default: str
    required: bool
    type: Any

    @property
    def has_default(self) -> bool:
        return self.default != ""

    @property
    def record_type(self) -> Optional[type]:
        """The nested dataclass type if this field holds a record (directly or via Optional)."""
        inner, _ = unwrap_optional(self.type)
        return inner if is_record_type(inner) else None

    @property
    def is_reference(self) -> bool:
        """True for ``Optional[Record]`` fields, which may legitimately be absent."""
        inner, optional = unwrap_optional(self.type)
        return optional and is_record_type(inner)


# (record type, default key, required key) -> descriptors
_metadata_cache: Dict[Tuple[type, str, str], Tuple[FieldDescriptor, ...]] = {}
_cache_lock = threading.Lock()


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """
    Split ``Optional[X]`` (or ``X | None``) into ``(X, True)``.

    Any other type comes back unchanged as ``(tp, False)``. Unions with more
    than one non-None member are not unwrapped.
    """
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(tp)
        members = [a for a in args if a is not _NONE_TYPE]
        if len(members) == 1 and len(args) == 2:
            return members[0], True
    return tp, False


def is_record_type(tp: Any) -> bool:
    """True if `tp` is a dataclass class (not an instance)."""
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def is_record(obj: Any) -> bool:
    """True if `obj` is a dataclass instance."""
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def is_mutable_record(obj: Any) -> bool:
    """True if `obj` is a dataclass instance whose class is not frozen."""
    return is_record(obj) and not type(obj).__dataclass_params__.frozen


@functools.lru_cache(maxsize=None)
def field_types(record_type: type) -> Dict[str, Any]:
    """
    Resolve the static type of every dataclass field, hidden ones included.

    When some forward reference cannot be resolved (a record declared inside
    a function, say), each annotation is resolved on its own and only the
    fields that still fail keep their raw annotation, which then behaves as
    an opaque type.

    Returns:
        Dict mapping field name to static type, in declaration order.
    """
    try:
        hints = typing.get_type_hints(record_type)
    except (NameError, TypeError) as e:
        log.debug(f"DEBUG [optionator.field_types]: Resolving {record_type.__qualname__} field by field: {e}")
        hints = _resolve_each(record_type)
    return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(record_type)}


def _resolve_each(record_type: type) -> Dict[str, Any]:
    module = sys.modules.get(record_type.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = {record_type.__name__: record_type}
    hints = {}
    for f in dataclasses.fields(record_type):
        if not isinstance(f.type, str):
            hints[f.name] = f.type
            continue
        try:
            hints[f.name] = eval(f.type, globalns, localns)
        except Exception as e:
            log.warning(f"Could not resolve annotation {f.type!r} of "
                        f"{record_type.__qualname__}.{f.name}, treating it as opaque: {e}")
    return hints


def describe(record_type: type, config: AnnotationConfig = DEFAULT_CONFIG) -> Tuple[FieldDescriptor, ...]:
    """
    Return the ordered field descriptors of a record type.

    Only visible fields (names not starting with ``_``) are described. The
    first call for a given type and annotation keys performs the
    introspection; later calls return the cached tuple.

    Args:
        record_type: A dataclass class.
        config: Annotation key names to read from each field's metadata.

    Returns:
        Tuple of ``FieldDescriptor``, empty if the type has no visible fields.

    Raises:
        InvalidTargetError: If `record_type` is not a dataclass class.
    """
    if not is_record_type(record_type):
        raise InvalidTargetError(record_type, "describe() expects a dataclass type")

    key = (record_type, config.default_key, config.required_key)
    cached = _metadata_cache.get(key)
    if cached is not None:
        return cached

    descriptors = _introspect(record_type, config)
    with _cache_lock:
        # Insert once; a concurrent caller that got here first wins.
        return _metadata_cache.setdefault(key, descriptors)


def _introspect(record_type: type, config: AnnotationConfig) -> Tuple[FieldDescriptor, ...]:
    hints = field_types(record_type)
    descriptors = []
    for index, f in enumerate(dataclasses.fields(record_type)):
        if f.name.startswith("_"):
            continue
        raw_default = f.metadata.get(config.default_key)
        raw_required = f.metadata.get(config.required_key)
        descriptors.append(FieldDescriptor(
            index=index,
            name=f.name,
            default="" if raw_default is None else str(raw_default),
            required=raw_required is True or raw_required == "true",
            type=hints[f.name],
        ))
    log.debug(f"DEBUG [optionator.describe]: Introspected {record_type.__qualname__}: "
              f"{[d.name for d in descriptors]}")
    return tuple(descriptors)

# optionator/validate.py
"""
optionator.validate
-------------------

Required-field validation, run after defaults and overrides.
"""

import logging
from typing import Any

from .config import AnnotationConfig, DEFAULT_CONFIG
from .defaults import is_zero
from .exceptions import InvalidTargetError, NilReferenceError, RequiredFieldError
from .metadata import describe, is_record

log = logging.getLogger(__name__)


def validate_required(record: Any, config: AnnotationConfig = DEFAULT_CONFIG) -> None:
    """
    Check that every required field of `record` holds a non-zero value.

    Fields are visited in declaration order. A nested record is validated
    before the parent checks the field itself; an absent reference is an
    error only when that reference is itself required. An ``init=False``
    field that was never assigned is treated as zero.

    Raises:
        InvalidTargetError: If `record` is not a dataclass instance.
        NilReferenceError: If a required nested-record reference is None.
        RequiredFieldError: For the first required field still at its zero value.
    """
    if not is_record(record):
        raise InvalidTargetError(record, "target must be a dataclass instance")
    log.debug(f"DEBUG [optionator.validate_required]: Validating {type(record).__qualname__}")
    for fd in describe(type(record), config):
        value = getattr(record, fd.name, None)
        if fd.record_type is not None:
            if value is None:
                if fd.required:
                    raise NilReferenceError(fd.name)
                continue
            validate_required(value, config)
        if fd.required and is_zero(value, fd.type):
            raise RequiredFieldError(fd.name)

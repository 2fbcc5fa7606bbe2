# optionator/options.py
"""
optionator.options
------------------

Entry points for building configuration objects from annotated dataclasses.

Build sequence (each phase runs only if the previous one succeeded):

1.  **Defaults**: every zero-valued field with a default annotation is set
    from the annotation text; absent nested records are allocated and
    defaulted first.
2.  **Overrides**: the option steps passed by the caller, in order. Later
    steps win over earlier ones.
3.  **Validation**: every field with a required annotation must hold a
    non-zero value.

Example::

    @dataclass
    class Server:
        address: str = field(default="", metadata={"default": "0.0.0.0", "required": "true"})
        timeout: timedelta = field(default=timedelta(0), metadata={"default": "30s"})
        max_conns: int = field(default=0, metadata={"default": "100"})

    srv = new(Server(), with_field("max_conns", 200))

Failures raise an ``OptionatorError`` subclass. Nothing is rolled back: a
caller that catches the error may observe a partially built record.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from .coerce import convert_value
from .config import AnnotationConfig, DEFAULT_CONFIG
from .defaults import apply_defaults
from .exceptions import (
    InvalidTargetError,
    UnassignableFieldError,
    UnknownFieldError,
)
from .metadata import field_types, is_mutable_record
from .validate import validate_required

log = logging.getLogger(__name__)

T = TypeVar("T")

# Any callable taking the target works as a step; Option is the built-in one.
Step = Callable[[Any], None]


@dataclass(frozen=True)
class Option:
    """Deferred assignment of `value` to the field called `name`.

    Apply it by calling it with the target record.
    """

    name: str
    value: Any

    def __call__(self, target: Any) -> None:
        if not is_mutable_record(target):
            raise InvalidTargetError(target)
        hints = field_types(type(target))
        if self.name not in hints:
            raise UnknownFieldError(self.name)
        if self.name.startswith("_"):
            raise UnassignableFieldError(self.name)

        converted = convert_value(self.value, hints[self.name], self.name)
        setattr(target, self.name, converted)
        log.debug(f"DEBUG [optionator.Option]: Set {type(target).__qualname__}.{self.name} = {converted!r}")


def with_field(name: str, value: Any) -> Option:
    """
    Return a step that sets field `name` to `value`.

    The value is converted to the field's static type when applied
    (see ``optionator.coerce.convert_value``).
    """
    return Option(name, value)


def chain(*steps: Step) -> Step:
    """Compose several steps into one that applies them in order."""
    def apply_all(target: Any) -> None:
        for step in steps:
            step(target)
    return apply_all


def new_with_config(target: T, config: AnnotationConfig, *steps: Step) -> T:
    """
    Populate `target` from its annotations, apply `steps`, then validate.

    Args:
        target: A mutable dataclass instance; it is modified in place.
        config: Annotation keys and unsupported-type policy.
        *steps: Override steps, applied in the given order.

    Returns:
        The same `target` object, fully populated.

    Raises:
        OptionatorError: The first failure of any phase.
    """
    if not is_mutable_record(target):
        raise InvalidTargetError(target)

    apply_defaults(target, config)
    log.debug(f"DEBUG [optionator.new]: Defaults applied to {type(target).__qualname__}")

    for step in steps:
        step(target)
    log.debug(f"DEBUG [optionator.new]: Applied {len(steps)} override step(s)")

    validate_required(target, config)
    log.debug("DEBUG [optionator.new]: Validated required fields.")
    return target


def new(target: T, *steps: Step) -> T:
    """``new_with_config`` with the built-in annotation keys ``default`` and ``required``."""
    return new_with_config(target, DEFAULT_CONFIG, *steps)

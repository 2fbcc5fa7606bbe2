# optionator/exceptions.py
"""
optionator.exceptions
---------------------

Custom exceptions for optionator.

Every error carries the offending field (or type) name as an attribute so
callers can build precise diagnostics without parsing messages.
"""


class OptionatorError(Exception):
    """
    Base class for every error raised by optionator.
    """


class InvalidTargetError(OptionatorError):
    """
    Raised when the target is not a mutable dataclass instance (or type, where a type is expected).
    """

    def __init__(self, target, reason="target must be a mutable dataclass instance"):
        super().__init__(f"{reason}, got {type(target).__name__}")
        self.target = target


class UnknownFieldError(OptionatorError):
    """
    Raised when an override names a field the record does not declare.
    """

    def __init__(self, field_name):
        super().__init__(f"no such field: {field_name}")
        self.field_name = field_name


class UnassignableFieldError(OptionatorError):
    """
    Raised when an override names a hidden (underscore-prefixed) field.
    """

    def __init__(self, field_name):
        super().__init__(f"cannot set field: {field_name}")
        self.field_name = field_name


class TypeMismatchError(OptionatorError):
    """
    Raised when an override value cannot be converted to the field's static type.
    """

    def __init__(self, value, target_type, field_name=None):
        message = f"cannot convert {type(value).__name__} to {type_name(target_type)}"
        if field_name:
            message += f" for field {field_name}"
        super().__init__(message)
        self.value = value
        self.target_type = target_type
        self.field_name = field_name


class DefaultValueError(OptionatorError):
    """
    Raised when a default annotation cannot be parsed into the field's type.

    The underlying parse error is chained as ``__cause__``.
    """

    def __init__(self, field_name, text, cause):
        super().__init__(f"error setting default for field {field_name}: {cause}")
        self.field_name = field_name
        self.text = text


class UnsupportedTypeError(OptionatorError):
    """
    Raised when a default annotation sits on a field whose type has no coercion rule.
    """

    def __init__(self, field_type, field_name=None):
        message = f"unsupported field type: {type_name(field_type)}"
        if field_name:
            message += f" (field {field_name})"
        super().__init__(message)
        self.field_type = field_type
        self.field_name = field_name


class AllocationError(OptionatorError):
    """
    Raised when an absent nested record cannot be created with a no-argument call.
    """

    def __init__(self, field_name, record_type, cause):
        super().__init__(
            f"cannot allocate {type_name(record_type)} for field {field_name}: {cause}"
        )
        self.field_name = field_name
        self.record_type = record_type


class RequiredFieldError(OptionatorError):
    """
    Raised when a required field still holds its zero value after overrides.
    """

    def __init__(self, field_name):
        super().__init__(f"required field {field_name} is zero")
        self.field_name = field_name


class NilReferenceError(OptionatorError):
    """
    Raised when a required nested-record reference is None at validation time.
    """

    def __init__(self, field_name):
        super().__init__(f"nil reference encountered in validation: field {field_name} is None")
        self.field_name = field_name


def type_name(tp) -> str:
    """Readable name for a class or typing construct."""
    if isinstance(tp, type):
        return tp.__name__
    return str(tp).replace("typing.", "")

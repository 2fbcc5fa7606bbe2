# optionator/config.py
"""
optionator.config
-----------------

Annotation configuration: which metadata keys mark a field's default and its
required flag, and how to treat default annotations on types that have no
coercion rule.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnnotationConfig:
    """Names of the field metadata keys optionator recognizes.

    Attributes:
        default_key: Metadata key holding the textual default, e.g.
            ``field(default=0, metadata={"default": "100"})``.
        required_key: Metadata key whose value ``"true"`` marks the field
            mandatory.
        strict: When True, a default annotation on a field whose type has no
            coercion rule raises ``UnsupportedTypeError``. When False the
            annotation is ignored and the field is left untouched.
    """

    default_key: str = "default"
    required_key: str = "required"
    strict: bool = True

    def __post_init__(self):
        if not self.default_key or not self.required_key:
            raise ValueError("annotation keys must be non-empty strings")
        if self.default_key == self.required_key:
            raise ValueError(
                f"default_key and required_key must differ (both are {self.default_key!r})"
            )


DEFAULT_CONFIG = AnnotationConfig()

# optionator/__init__.py
"""
optionator – Declarative defaults and required fields for dataclass configuration objects.

Import `new`, `new_with_config` and `with_field` from `optionator.options`,
`AnnotationConfig` from `optionator.config` and the error types from
`optionator.exceptions`.

Modules:
    - metadata: cached field descriptors per dataclass type
    - coerce: default-text parsing (numbers, bools, durations) and override conversion
    - defaults: recursive default application
    - validate: required-field validation
    - options: override steps and the `new` entry points
    - numeric: fixed-width integer field types
    - cli: `optionator` command line (click)
"""

__version__ = "0.1.0"

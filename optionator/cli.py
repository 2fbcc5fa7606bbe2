# optionator/cli.py

import json
import logging

import click

from .coerce import coerce_default, find_coercer
from .config import AnnotationConfig
from .example import Server
from .exceptions import OptionatorError, type_name
from .metadata import describe as describe_fields, field_types, is_record_type, unwrap_optional
from .options import new_with_config, with_field
from .utils import import_string, to_plain


def _parse_value(raw_value: str):
    """
    Parse a command-line string into a Python value.

    Handles 'true', 'false', 'null' (case-insensitive), integers, floats and
    JSON lists/dicts/quoted strings. Falls back to the original string.
    """
    stripped_val = raw_value.strip()
    lower_val = stripped_val.lower()
    if lower_val == 'true':
        return True
    if lower_val == 'false':
        return False
    if lower_val == 'null':
        return None

    try:
        return int(stripped_val)
    except ValueError:
        try:
            return float(stripped_val)
        except ValueError:
            pass

    # Only attempt JSON when it looks like JSON
    if (stripped_val.startswith("{") and stripped_val.endswith("}")) or \
       (stripped_val.startswith("[") and stripped_val.endswith("]")) or \
       (stripped_val.startswith('"') and stripped_val.endswith('"') and len(stripped_val) > 1):
        try:
            return json.loads(stripped_val)
        except json.JSONDecodeError:
            pass

    return raw_value


def _override_value(record_type: type, key: str, raw: str):
    """
    Turn the text of a ``--set`` flag into the value handed to ``with_field``.

    Fields with a text parser (strings, numbers, bools, durations) parse the
    text exactly like a default annotation (string fields keep the text
    verbatim, others ignore surrounding whitespace); ``null`` clears an
    Optional field. Other fields get the generic ``_parse_value`` treatment.
    """
    static_type = field_types(record_type).get(key)
    if static_type is None:
        # with_field reports the unknown field
        return _parse_value(raw)
    _, optional = unwrap_optional(static_type)
    if optional and raw.strip().lower() == "null":
        return None
    if find_coercer(static_type) is not None:
        return coerce_default(raw if _is_str_field(static_type) else raw.strip(), static_type, key)
    return _parse_value(raw)


def _is_str_field(static_type) -> bool:
    base, _ = unwrap_optional(static_type)
    return isinstance(base, type) and issubclass(base, str)


def _split_assignments(assignments):
    pairs = []
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--set")
        pairs.append((key.strip(), raw))
    return pairs


def _load_record_type(spec: str) -> type:
    try:
        obj = import_string(spec)
    except (ValueError, ImportError, AttributeError) as e:
        raise click.BadParameter(str(e), param_hint="TARGET")
    if not is_record_type(obj):
        raise click.BadParameter(f"{spec} is not a dataclass", param_hint="TARGET")
    return obj


def _build_and_print(ctx, record_type: type, assignments):
    config = ctx.obj["config"]
    pairs = _split_assignments(assignments)
    try:
        steps = [with_field(key, _override_value(record_type, key, raw)) for key, raw in pairs]
        instance = new_with_config(record_type(), config, *steps)
    except (OptionatorError, ValueError, OverflowError, TypeError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        ctx.exit(1)
    click.echo(json.dumps(to_plain(instance), indent=2))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--default-key",  default="default",  show_default=True,
              help="Field metadata key holding default values")
@click.option("--required-key", default="required", show_default=True,
              help="Field metadata key marking required fields")
@click.option("--lenient",      is_flag=True,
              help="Ignore default annotations on unsupported field types")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, default_key, required_key, lenient, verbose):
    """
    optionator CLI: build annotated dataclasses from the command line.

    Subcommands:
      • describe  TARGET
      • build     TARGET [-s KEY=VALUE ...]
      • demo      [-s KEY=VALUE ...]

    TARGET is a dataclass given as `package.module:ClassName`.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    try:
        config = AnnotationConfig(default_key=default_key, required_key=required_key, strict=not lenient)
    except ValueError as e:
        raise click.UsageError(str(e))
    ctx.obj = {"config": config}


@cli.command()
@click.argument("target")
@click.pass_context
def describe(ctx, target):
    """Print the field descriptors of TARGET as JSON."""
    record_type = _load_record_type(target)
    rows = [
        {
            "index": fd.index,
            "name": fd.name,
            "default": fd.default,
            "required": fd.required,
            "type": type_name(fd.type),
        }
        for fd in describe_fields(record_type, ctx.obj["config"])
    ]
    click.echo(json.dumps(rows, indent=2))


@cli.command()
@click.argument("target")
@click.option("-s", "--set", "assignments", multiple=True, metavar="KEY=VALUE",
              help="Override a field (repeatable, applied in order)")
@click.pass_context
def build(ctx, target, assignments):
    """Build TARGET from its defaults and overrides, then print it as JSON."""
    _build_and_print(ctx, _load_record_type(target), assignments)


@cli.command()
@click.option("-s", "--set", "assignments", multiple=True, metavar="KEY=VALUE",
              help="Override a field (repeatable, applied in order)")
@click.pass_context
def demo(ctx, assignments):
    """Build the bundled example Server configuration."""
    _build_and_print(ctx, Server, assignments)

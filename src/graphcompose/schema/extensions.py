# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Field extensions: directive-driven field transformations.

A field extension is registered under a directive name (``@link``,
``@proxy``, ``@dateformat``). Its options live in the field's extension map
under the same name; validation fills defaults and reports bad options, and
processing rewrites the field's resolver and arguments.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import ArgumentDefinition, FieldDefinition, TypeDefinition
from graphcompose.model.types import named, named_type
from graphcompose.query.filtering import get_value_at_path
from graphcompose.query.node_model import NodeModel
from graphcompose.query.resolvers import link_resolver

# ###############
# Public Interface
# ###############

# Extension keys maintained by the build itself; never treated as directives.
INTERNAL_EXTENSION_NAMES: frozenset[str] = frozenset(
    {
        "createdFrom",
        "default",
        "defaultValue",
        "deprecated",
        "directives",
        "extensionsApplied",
        "needsResolve",
        "originalFieldConfig",
        "plugin",
        "searchable",
        "sortable",
    }
)


@dataclass(frozen=True)
class FieldExtension:
    """A named field transformation.

    Attributes:
        name: Directive / extension name.
        args: Accepted option names mapped to their default (``None`` for none).
        required: Option names that must be provided.
        extend: Callable ``(field_def, options, node_model)`` rewriting the field.
        description: Shown when the directive is printed.
    """

    name: str
    args: Mapping[str, Any]
    extend: Callable[[FieldDefinition, dict[str, Any], NodeModel], None]
    required: frozenset[str] = field(default_factory=frozenset)
    description: str = ""


def validate_field_extensions(type_def: TypeDefinition, reporter: Reporter) -> None:
    """Check every field extension of *type_def* and fill in default options.

    Unknown extensions and invalid options are reported as errors and removed
    from the field so later phases never see them.
    """
    for field_name, field_def in type_def.fields.items():
        for name in list(field_def.extensions):
            if name in INTERNAL_EXTENSION_NAMES:
                continue
            options = field_def.extensions[name]
            where = f"`{type_def.name}.{field_name}`"
            extension = FIELD_EXTENSIONS.get(name)
            if extension is None:
                reporter.error(f"Field extension `{name}` on {where} is not available.")
                del field_def.extensions[name]
                continue
            if options is None or options is True:
                options = {}
            if not isinstance(options, Mapping):
                reporter.error(
                    f'Field extension arguments must be provided as an object. Received "{options}" on {where}.'
                )
                del field_def.extensions[name]
                continue
            invalid = [arg for arg in options if arg not in extension.args]
            for arg in invalid:
                reporter.error(f"Field extension `{name}` on {where} has invalid argument `{arg}`.")
            missing = [arg for arg in sorted(extension.required) if options.get(arg) is None]
            for arg in missing:
                reporter.error(f"Field extension `{name}` on {where} is missing required argument `{arg}`.")
            if invalid or missing:
                del field_def.extensions[name]
                continue
            merged = {arg: default for arg, default in extension.args.items() if default is not None}
            merged.update(options)
            field_def.extensions[name] = merged


def apply_field_extensions(type_def: TypeDefinition, node_model: NodeModel) -> None:
    """Run the registered field extensions on every field of *type_def*.

    ``proxy`` runs last so it wraps whatever resolver the other extensions set.
    """
    for field_def in type_def.fields.values():
        if field_def.extensions.get("extensionsApplied"):
            continue
        names = [name for name in field_def.extensions if name in FIELD_EXTENSIONS]
        names.sort(key=lambda name: name == "proxy")
        for name in names:
            FIELD_EXTENSIONS[name].extend(field_def, dict(field_def.extensions[name]), node_model)
        if names:
            field_def.extensions["extensionsApplied"] = True


def format_date(
    value: Any,
    format_string: str | None = None,
    from_now: bool = False,
    difference: str | None = None,
    now: datetime | None = None,
) -> Any:
    """Format an ISO date string (or ``date``/``datetime``).

    Values that are not dates are returned unchanged; lists are formatted
    element-wise.

    Args:
        value: The raw value.
        format_string: ``strftime`` pattern.
        from_now: Render a relative description such as ``"3 days ago"``.
        difference: Unit (``days``, ``hours``, ...) for the whole-unit distance to now.
        now: Reference time, defaults to the current time.
    """
    if isinstance(value, list):
        return [format_date(item, format_string, from_now, difference, now) for item in value]
    moment = _to_datetime(value)
    if moment is None:
        return value
    reference = now or datetime.now(moment.tzinfo)
    if difference:
        seconds = (reference - moment).total_seconds()
        return int(seconds // _UNIT_SECONDS.get(difference.rstrip("s"), 1))
    if from_now:
        return _relative(moment, reference)
    if format_string:
        return moment.strftime(format_string)
    return moment.isoformat()


# ################
# Implementation
# ################

_UNIT_SECONDS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 604800,
    "month": 2592000,
    "year": 31536000,
}


def _to_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _relative(moment: datetime, reference: datetime) -> str:
    seconds = (reference - moment).total_seconds()
    amount, unit = abs(seconds), "second"
    for name in ("year", "month", "week", "day", "hour", "minute"):
        if abs(seconds) >= _UNIT_SECONDS[name]:
            amount, unit = abs(seconds) // _UNIT_SECONDS[name], name
            break
    label = f"{int(amount)} {unit}{'' if int(amount) == 1 else 's'}"
    return f"{label} ago" if seconds >= 0 else f"in {label}"


def _read(source: Any, field_name: str) -> Any:
    return get_value_at_path(source, field_name)


def _extend_link(field_def: FieldDefinition, options: dict[str, Any], node_model: NodeModel) -> None:
    field_def.resolve = link_resolver(
        node_model,
        named_type(field_def.type),
        field_def.name,
        by=options.get("by", "id"),
        from_=options.get("from"),
    )


def _extend_proxy(field_def: FieldDefinition, options: dict[str, Any], node_model: NodeModel) -> None:
    source_path = options["from"]
    field_name = field_def.name
    prior = field_def.resolve

    def resolve(source: Any, info: Any, **args: Any) -> Any:
        value = _read(source, source_path)
        if prior is None:
            return value
        proxied = {**source, field_name: value} if isinstance(source, Mapping) else source
        return prior(proxied, info, **args)

    field_def.resolve = resolve


def _extend_dateformat(field_def: FieldDefinition, options: dict[str, Any], node_model: NodeModel) -> None:
    field_name = field_def.name
    prior = field_def.resolve
    defaults = {
        "formatString": options.get("formatString"),
        "fromNow": options.get("fromNow"),
        "difference": options.get("difference"),
        "locale": options.get("locale"),
    }
    field_def.args.update(
        {
            "formatString": _argument("formatString", "String", defaults["formatString"]),
            "fromNow": _argument("fromNow", "Boolean", defaults["fromNow"]),
            "difference": _argument("difference", "String", defaults["difference"]),
            "locale": _argument("locale", "String", defaults["locale"]),
        }
    )

    def resolve(source: Any, info: Any, **args: Any) -> Any:
        value = prior(source, info) if prior is not None else _read(source, field_name)
        settings = {**defaults, **{key: val for key, val in args.items() if key in defaults}}
        return format_date(
            value,
            format_string=settings["formatString"],
            from_now=bool(settings["fromNow"]),
            difference=settings["difference"],
        )

    field_def.resolve = resolve


def _argument(name: str, type_name: str, default: Any) -> ArgumentDefinition:
    return ArgumentDefinition(name=name, type=named(type_name), default_value=default, has_default=default is not None)


FIELD_EXTENSIONS: dict[str, FieldExtension] = {
    "link": FieldExtension(
        name="link",
        args={"by": "id", "from": None, "on": None},
        extend=_extend_link,
        description="Link to node by foreign-key relation.",
    ),
    "proxy": FieldExtension(
        name="proxy",
        args={"from": None, "fromNode": None},
        required=frozenset({"from"}),
        extend=_extend_proxy,
        description="Proxy resolver from another field.",
    ),
    "dateformat": FieldExtension(
        name="dateformat",
        args={"formatString": None, "locale": None, "fromNow": None, "difference": None},
        extend=_extend_dateformat,
        description="Format the date using strftime patterns.",
    ),
}

# Directive argument types, used when printing directive definitions.
DIRECTIVE_ARGUMENT_TYPES: dict[str, dict[str, str]] = {
    "link": {"by": "String", "from": "String", "on": "String"},
    "proxy": {"from": "String!", "fromNode": "Boolean"},
    "dateformat": {"formatString": "String", "locale": "String", "fromNow": "Boolean", "difference": "String"},
}

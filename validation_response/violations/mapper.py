"""Mapping of pydantic validation errors onto violation records."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import MutableMapping
from collections.abc import MutableSequence
from collections.abc import Sequence
from collections.abc import Set
import types
from typing import Annotated
from typing import Any
from typing import Literal
from typing import Union
from typing import get_args
from typing import get_origin

from pydantic import BaseModel

from validation_response.schemas.violation import Violation

_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})
_BODY_SOURCE = "body"
# Pydantic appends this entry to the location of an invalid dict key.
_DICT_KEY_MARKER = "[key]"
_VALUE_ERROR_PREFIX = "Value error, "
_PATH_SPECIAL_CHARS = frozenset(".[]")

_MAPPING_ORIGINS = (dict, Mapping, MutableMapping)
_SEQUENCE_ORIGINS = (list, set, frozenset, Sequence, MutableSequence, Set)


def format_property_path(
    location: tuple[Any, ...] | list[Any] | Any,
    *,
    from_request: bool = False,
    schema: Any = None,
) -> str:
    """Render a pydantic error location as a dotted/bracketed property path.

    With ``from_request`` the leading request source is dropped, so
    ``("body", "items", 0, "name")`` becomes ``items[0].name``.

    ``schema`` is the type the location starts from (a model class for
    ``model_validate`` errors, the body type for request errors). Where it
    shows a union, the member tag pydantic adds to the location is left out
    of the path. Keys holding ``.``, ``[`` or ``]``, and empty keys, are
    written as quoted brackets (``tags["a.b"]``).
    """
    if not isinstance(location, (tuple, list)):
        return str(location)

    parts = list(location)
    if from_request and parts and parts[0] in _LOCATION_PREFIXES:
        if parts[0] != _BODY_SOURCE:
            schema = None
        parts = parts[1:]

    path = ""
    annotation = schema
    for part in parts:
        annotation = _unwrap(annotation)
        if _is_union(annotation):
            annotation = _union_member(annotation, part)
            continue
        if part == _DICT_KEY_MARKER:
            continue
        if isinstance(part, int) and not isinstance(part, bool):
            path += f"[{part}]"
        else:
            path += _key_segment(str(part), first=not path)
        annotation = _child_annotation(annotation, part)
    return path


def map_pydantic_errors(
    errors: Iterable[Mapping[str, Any]],
    *,
    from_request: bool = False,
    schema: Any = None,
) -> list[Violation]:
    """Convert ``ValidationError.errors()`` output into ordered violations."""
    violations: list[Violation] = []
    for issue in errors:
        code = issue.get("type")
        violations.append(
            Violation(
                path=format_property_path(issue.get("loc", ()), from_request=from_request, schema=schema),
                message=clean_pydantic_message(str(issue.get("msg", "Invalid value"))),
                code=None if code is None else str(code),
            )
        )
    return violations


def clean_pydantic_message(message: str) -> str:
    """Drop the ``Value error, `` prefix pydantic adds to custom validator messages."""
    if message.startswith(_VALUE_ERROR_PREFIX):
        return message[len(_VALUE_ERROR_PREFIX) :]
    return message


def _key_segment(key: str, *, first: bool) -> str:
    if key and not _PATH_SPECIAL_CHARS.intersection(key):
        return key if first else f".{key}"
    quote = "'" if '"' in key else '"'
    return f"[{quote}{key}{quote}]"


def _unwrap(annotation: Any) -> Any:
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation = get_args(annotation)[0]
            continue
        if _is_union_origin(origin):
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(members) == 1:
                annotation = members[0]
                continue
        return annotation


def _is_union_origin(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def _is_union(annotation: Any) -> bool:
    return _is_union_origin(get_origin(annotation))


def _union_member(annotation: Any, tag: Any) -> Any:
    """Return the union member named by a pydantic union tag, if it can be told apart."""
    for member in get_args(annotation):
        member = _unwrap(member)
        origin = get_origin(member)
        if origin is not None:
            if isinstance(tag, str) and tag.startswith(f"{getattr(origin, '__name__', '')}["):
                return member
            continue
        if not isinstance(member, type):
            continue
        if member.__name__ == tag:
            return member
        if issubclass(member, BaseModel) and _declares_discriminator(member, tag):
            return member
    return None


def _declares_discriminator(model: type[BaseModel], tag: Any) -> bool:
    for field in model.model_fields.values():
        annotation = _unwrap(field.annotation)
        if get_origin(annotation) is Literal and tag in get_args(annotation):
            return True
    return False


def _child_annotation(annotation: Any, part: Any) -> Any:
    if annotation is None:
        return None

    origin = get_origin(annotation)
    if origin is None and isinstance(annotation, type) and issubclass(annotation, BaseModel):
        for name, field in annotation.model_fields.items():
            if part in (name, field.alias):
                return field.annotation
        return None

    args = get_args(annotation)
    if origin in _MAPPING_ORIGINS:
        return args[1] if len(args) == 2 else None
    if origin in _SEQUENCE_ORIGINS:
        return args[0] if args else None
    if origin is tuple and isinstance(part, int):
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return args[part] if 0 <= part < len(args) else None
    return None

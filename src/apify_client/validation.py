"""Argument checks that run before any request is dispatched."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import InvalidParameterTypeError, MissingParameterError


ModelT = TypeVar("ModelT", bound=BaseModel)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def _is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_buffer(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


KIND_CHECKS = {
    "String": _is_string,
    "Number": _is_number,
    "Boolean": _is_boolean,
    "Object": _is_object,
    "Array": _is_array,
    "Buffer": _is_buffer,
}


@lru_cache(maxsize=None)
def parse_kind(kind: str) -> tuple[bool, tuple[str, ...]]:
    """Split a kind descriptor such as ``"Maybe Buffer | String"``.

    Returns whether the value is optional and the accepted kind names.
    """
    optional = False
    descriptor = kind.strip()
    if descriptor.startswith("Maybe "):
        optional = True
        descriptor = descriptor[len("Maybe ") :]
    names = tuple(part.strip() for part in descriptor.split("|"))
    for name in names:
        if name not in KIND_CHECKS:
            raise ValueError(f"Unknown parameter kind: {name}")
    return optional, names


def check_param(value: Any, name: str, kind: str) -> None:
    """Raise unless ``value`` matches ``kind``."""
    optional, names = parse_kind(kind)
    if value is None:
        if optional:
            return
        raise MissingParameterError(f'Parameter "{name}" is required', parameter=name)
    if any(KIND_CHECKS[kind_name](value) for kind_name in names):
        return
    expected = " or ".join(names)
    raise InvalidParameterTypeError(
        f'Parameter "{name}" must be of type {expected}, got {type(value).__name__}',
        parameter=name,
    )


def parse_options(model: type[ModelT], options: Mapping[str, Any] | None) -> ModelT:
    """Validate an option bag against an exact-shape model."""
    try:
        return model.model_validate(dict(options or {}))
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error.get("loc", ())) or "options"
        raise InvalidParameterTypeError(
            f'Parameter "{location}" is invalid: {error.get("msg", "invalid value")}',
            parameter=location,
            cause=exc,
        ) from exc

"""Error Builders

Ergonomic constructors for each parse-time error kind. Every builder renders
its message through the supplied MessageRenderer so catalogs can be swapped
without touching Types or Constraints.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from valida.messages import DEFAULT_MESSAGES, MessageRenderer

from .types import Error, ErrorCode, Path


def required_error(path: Path, messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    return Error(path=path, message=messages.render("required"), code=ErrorCode.REQUIRED)


def coercion_error(path: Path, value: Any, type_name: str,
                   messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    """Raw value could not be converted to the target type."""
    return Error(path=path, code=ErrorCode.TYPE_ERROR,
        message=messages.render("coercion_error", actual=type(value).__name__, type_name=type_name))


def type_error(path: Path, type_name: str, messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    """Value has the wrong shape after (or without) coercion."""
    return Error(path=path, message=messages.render("type_error", type_name=type_name), code=ErrorCode.TYPE_ERROR)


def object_expected(path: Path, messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    return Error(path=path, message=messages.render("object_expected"), code=ErrorCode.TYPE_ERROR)


def union_error(path: Path, type_names: Iterable[str], messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    return Error(path=path, code=ErrorCode.UNION_TYPE_ERROR,
        message=messages.render("union_type_error", types=", ".join(type_names)))


def discriminator_missing(path: Path, messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    return Error(path=path, message=messages.render("discriminator_missing"), code=ErrorCode.DISCRIMINATOR_MISSING)


def invalid_discriminator(path: Path, valid_values: Iterable[Any],
                          messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    return Error(path=path, code=ErrorCode.INVALID_DISCRIMINATOR,
        message=messages.render("invalid_discriminator", values=", ".join(repr(v) for v in valid_values)))


def refinement_error(path: Path, message: str | None = None,
                     messages: MessageRenderer = DEFAULT_MESSAGES) -> Error:
    return Error(path=path, message=message or messages.render("refinement"), code=ErrorCode.REFINEMENT)


def custom_error(path: Path, message: str) -> Error:
    """Error raised from a schema-level validator."""
    return Error(path=path, message=message, code=ErrorCode.CUSTOM)

"""Error Message Rendering

The engine renders every error message through a MessageRenderer keyed by
message kind. MessageCatalog is the built-in English implementation; a
localized catalog only needs a compatible render().

Usage:
    terse = DEFAULT_MESSAGES.with_overrides(required="can't be blank")
    schema = valida.schema(build, messages=terse)
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

DEFAULT_TEMPLATES: Mapping[str, str] = MappingProxyType({
    "required": "is required",
    "coercion_error": "cannot coerce {actual} to {type_name}",
    "type_error": "must be a {type_name}",
    "object_expected": "must be an object",
    "literal": "must be {expected}, got {actual}",
    "min": "must be at least {limit}",
    "min_length": "length must be at least {limit} (got {actual})",
    "max": "must be at most {limit}",
    "max_length": "length must be at most {limit} (got {actual})",
    "length_exact": "length must be exactly {exact} (got {actual})",
    "length_range": "length must be between {min} and {max} (got {actual})",
    "format": "must match format {pattern}",
    "format_named": "must be a valid {name}",
    "enum": "must be one of: {values}",
    "refinement": "failed refinement",
    "union_type_error": "must be one of: {types}",
    "discriminator_missing": "discriminator field is required",
    "invalid_discriminator": "must be one of: {values}",
})


@runtime_checkable
class MessageRenderer(Protocol):
    """Anything that can turn a message key plus parameters into text."""

    def render(self, key: str, **params: Any) -> str: ...


class _KeepMissing(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


@dataclass(frozen=True, slots=True)
class MessageCatalog:
    """Template-based renderer using str.format placeholders."""
    templates: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TEMPLATES)

    def render(self, key: str, **params: Any) -> str:
        template = self.templates.get(key, key)
        return template.format_map(_KeepMissing(params))

    def with_overrides(self, **templates: str) -> MessageCatalog:
        """Return a new catalog with some templates replaced."""
        return MessageCatalog(templates=MappingProxyType({**self.templates, **templates}))


DEFAULT_MESSAGES = MessageCatalog()

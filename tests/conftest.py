"""Shared fixtures for the valida test-suite."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from valida.config import get_settings
from valida.registry import ConstraintRegistry, TypeRegistry, default_constraint_registry, default_type_registry


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Settings are cached process-wide; every test sees the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def types() -> TypeRegistry:
    return default_type_registry().copy()


@pytest.fixture
def constraints() -> ConstraintRegistry:
    return default_constraint_registry().copy()


def pytest_make_parametrize_id(config, val, argname):
    """Give huge integers a short test id; str() on them exceeds Python's digit limit."""
    if isinstance(val, int) and not isinstance(val, bool) and val.bit_length() > 10000:
        return f"{argname}-int{val.bit_length()}bits"
    return None

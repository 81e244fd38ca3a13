"""Provider registry: validation at construction and priority ordering."""
from __future__ import annotations

import pytest

from llm_gateway.base.errors import ErrorCode, RegistryConfigError, UnknownProviderError
from llm_gateway.base.registry import ProviderRegistry

from .helpers import make_descriptor


def test_list_orders_by_priority_and_keeps_insertion_order_on_ties():
    reg = ProviderRegistry(
        [
            make_descriptor("c", priority=2),
            make_descriptor("a", priority=0),
            make_descriptor("b1", priority=1),
            make_descriptor("b2", priority=1),
        ]
    )
    assert [d.id for d in reg.list()] == ["a", "b1", "b2", "c"]
    assert [d.id for d in reg] == ["a", "b1", "b2", "c"]
    assert len(reg) == 4
    assert "b2" in reg and "zzz" not in reg


def test_get_unknown_provider_raises_not_found():
    reg = ProviderRegistry([make_descriptor("a")])
    with pytest.raises(UnknownProviderError) as info:
        reg.get("nope")
    assert info.value.code is ErrorCode.NOT_FOUND
    assert info.value.provider == "nope"


def test_duplicate_ids_rejected():
    with pytest.raises(RegistryConfigError, match="duplicate"):
        ProviderRegistry([make_descriptor("a"), make_descriptor("a", priority=3)])


def test_empty_model_set_rejected():
    with pytest.raises(RegistryConfigError, match="no supported models"):
        ProviderRegistry([make_descriptor("a", model="m1", models=())])


def test_default_model_outside_supported_set_rejected():
    with pytest.raises(RegistryConfigError, match="not in its supported models"):
        ProviderRegistry([make_descriptor("a", model="other", models=("m1",))])


def test_registry_config_error_is_a_value_error():
    assert issubclass(RegistryConfigError, ValueError)

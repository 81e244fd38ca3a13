"""Shared fixtures: scripted two-provider gateway wiring and log capture."""
from __future__ import annotations

from typing import Iterator

import pytest

from llm_gateway.base.factory import ModelFactory
from llm_gateway.base.logging import LOG_LEVEL_ENV, get_logger
from llm_gateway.base.registry import ProviderRegistry
from llm_gateway.base.repositories.keys import CredentialResolver
from llm_gateway.base.routing import FallbackRouter

from .helpers import ListHandler, ScriptedBackend, delta, make_descriptor


@pytest.fixture(autouse=True)
def _default_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


@pytest.fixture()
def log_records() -> Iterator[ListHandler]:
    """Attach a capturing handler to the shared ``llm_gateway`` logger (INFO and up)."""
    logger = get_logger()
    handler = ListHandler()
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)


@pytest.fixture()
def registry() -> ProviderRegistry:
    return ProviderRegistry(
        [
            make_descriptor("alpha", "ALPHA_API_KEY", priority=0),
            make_descriptor("beta", "BETA_API_KEY", priority=1),
        ]
    )


@pytest.fixture()
def backends():
    return {
        "alpha": ScriptedBackend("alpha", [delta("from "), delta("alpha")]),
        "beta": ScriptedBackend("beta", [delta("from "), delta("beta")]),
    }


@pytest.fixture()
def make_router(registry, backends):
    """Return ``build(environ) -> (router, factory)`` over the scripted backends."""

    def build(environ):
        factory = ModelFactory(registry, backends=backends)
        return FallbackRouter(registry, CredentialResolver(environ), factory), factory

    return build

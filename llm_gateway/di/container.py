"""Composition root for the gateway.

Goals:
- Build the registry, resolver, factory, router and gateway once from a
  single ``GatewayConfig`` and share them.
- Keep request code free of configuration lookups: everything downstream
  receives its collaborators through constructors.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..base.factory import ModelFactory
from ..base.interfaces import ProviderBackend
from ..base.metrics import MetricsExporter, get_default_exporter
from ..base.middleware import ChatMiddlewareChain, ObservabilityMiddleware
from ..base.registry import ProviderRegistry
from ..base.repositories.keys import CredentialResolver
from ..base.routing import FallbackRouter
from ..config import GatewayConfig, load_gateway_config
from ..gateway import ChatGateway


class GatewayContainer:
    """Dependency injection container for gateway services and singletons.

    Every accessor builds its object on first use and caches it, so all
    consumers share one registry, one factory (and its loaded backends) and
    one gateway.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        backends: Optional[Mapping[str, ProviderBackend]] = None,
        exporter: Optional[MetricsExporter] = None,
    ) -> None:
        """Initialize the container.

        Args:
            config: Immutable start-up configuration.
            backends: Optional pre-built backends keyed by provider id; used by
                tests and embedders to bypass the lazy import map.
            exporter: Metrics exporter for stream metrics; defaults to the one
                selected by ``GATEWAY_METRICS_EXPORT``.
        """
        self._config = config
        self._backends = dict(backends or {})
        self._exporter = exporter
        self._singletons: Dict[str, Any] = {}

    @property
    def config(self) -> GatewayConfig:
        return self._config

    # ---- Shared singletons ----
    def registry(self) -> ProviderRegistry:
        if "registry" not in self._singletons:
            self._singletons["registry"] = ProviderRegistry(self._config.descriptors)
        return self._singletons["registry"]

    def resolver(self) -> CredentialResolver:
        if "resolver" not in self._singletons:
            self._singletons["resolver"] = CredentialResolver(self._config.environ)
        return self._singletons["resolver"]

    def exporter(self) -> MetricsExporter:
        if "exporter" not in self._singletons:
            self._singletons["exporter"] = self._exporter or get_default_exporter(self._config.environ)
        return self._singletons["exporter"]

    def middleware(self) -> ChatMiddlewareChain:
        if "middleware" not in self._singletons:
            self._singletons["middleware"] = ChatMiddlewareChain([ObservabilityMiddleware(self.exporter())])
        return self._singletons["middleware"]

    def factory(self) -> ModelFactory:
        if "factory" not in self._singletons:
            self._singletons["factory"] = ModelFactory(
                self.registry(),
                backends=self._backends,
                middleware=self.middleware(),
            )
        return self._singletons["factory"]

    def router(self) -> FallbackRouter:
        if "router" not in self._singletons:
            self._singletons["router"] = FallbackRouter(self.registry(), self.resolver(), self.factory())
        return self._singletons["router"]

    def gateway(self) -> ChatGateway:
        """Return the shared ``ChatGateway``."""
        if "gateway" not in self._singletons:
            self._singletons["gateway"] = ChatGateway(
                self.router(),
                self.registry(),
                self.resolver(),
                self._config.timeouts,
            )
        return self._singletons["gateway"]

    def clear(self) -> None:  # testing convenience
        self._singletons.clear()


def build_container(
    config: Optional[GatewayConfig] = None,
    *,
    backends: Optional[Mapping[str, ProviderBackend]] = None,
    exporter: Optional[MetricsExporter] = None,
) -> GatewayContainer:
    """Construct a container, loading configuration from the environment if needed.

    Raises:
        RegistryConfigError: if the configured catalog is inconsistent. The
            registry is built eagerly so bad configuration fails at start-up.
    """
    container = GatewayContainer(config or load_gateway_config(), backends=backends, exporter=exporter)
    container.registry()
    return container


def build_gateway(
    config: Optional[GatewayConfig] = None,
    *,
    backends: Optional[Mapping[str, ProviderBackend]] = None,
    exporter: Optional[MetricsExporter] = None,
) -> ChatGateway:
    """Shortcut for ``build_container(...).gateway()``."""
    return build_container(config, backends=backends, exporter=exporter).gateway()


__all__ = ["GatewayContainer", "build_container", "build_gateway"]

"""Stream middleware: hook base class, chain, observability and the observed handle."""

from .chain import ChatMiddlewareChain
from .middleware_base import Middleware
from .observability import ObservabilityMiddleware
from .observed_handle import ObservedModelHandle

__all__ = ["Middleware", "ChatMiddlewareChain", "ObservabilityMiddleware", "ObservedModelHandle"]

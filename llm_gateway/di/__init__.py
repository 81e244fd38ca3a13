"""Composition root: wires configuration into a ready ``ChatGateway``."""
from __future__ import annotations

from .container import GatewayContainer, build_container, build_gateway

__all__ = ["GatewayContainer", "build_container", "build_gateway"]

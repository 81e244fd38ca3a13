"""Unified configuration layer for the gateway.

Goals
-----
* Build one immutable ``GatewayConfig`` at start-up and pass it down; request
  code never reads the process environment.
* Merge sources in a predictable order (later wins):
    1. Built-in catalog (``config.defaults``)
    2. Optional external config file (JSON or YAML) named by GATEWAY_CONFIG_FILE
    3. Environment variables

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL      default model; also added to the supported set
<PROVIDER>_BASE_URL   endpoint override
AI_PROVIDER           comma-separated ids; restricts and orders the catalog
GATEWAY_USE_MOCKS     ``1`` adds the offline mock provider
CUSTOM_BASE_URL       enables the ``custom`` OpenAI-compatible provider
                      (with CUSTOM_MODEL and CUSTOM_API_KEY)
GATEWAY_TIMEOUT_START_SECONDS / GATEWAY_TIMEOUT_STREAM_SECONDS

A ``.env`` file (``DOTENV_FILE``, default ``.env``) is read into the
environment snapshot; real values already in the environment win over it,
placeholders do not. ``os.environ`` itself is never modified.

External Config File
--------------------
JSON is tried first, then YAML. Structure example:

```
openai:
  model: gpt-4o
  models: [gpt-4o, gpt-4o-mini]
  priority: 0
ollama:
  enabled: true
  base_url: http://gpu-box:11434/v1
timeouts:
  start_seconds: 10
  stream_seconds: 45
```
"""
from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from dotenv import dotenv_values

from ..base.errors import RegistryConfigError
from ..base.logging import get_logger, log_event
from ..base.models import ProviderDescriptor
from ..base.timeouts import TimeoutConfig, timeout_config_from_env
from .defaults import DEFAULT_CATALOG
from .env import (
    AI_PROVIDER_ENV,
    BASE_URL_SUFFIX,
    CONFIG_FILE_ENV,
    DEFAULT_DOTENV_FILE,
    DOTENV_FILE_ENV,
    MODEL_SUFFIX,
    USE_MOCKS_ENV,
    env_value,
    is_placeholder,
    is_truthy,
    parse_provider_list,
    provider_env_name,
)

_TIMEOUTS_SECTION = "timeouts"

_logger = get_logger("llm_gateway.config")


@dataclass(frozen=True)
class GatewayConfig:
    """Immutable start-up configuration.

    Attributes:
        descriptors: Provider catalog entries, in configured order.
        timeouts: Bounds enforced by the streaming transport.
        environ: Read-only environment snapshot (process env plus ``.env``)
            used for credential resolution.
    """

    descriptors: Tuple[ProviderDescriptor, ...]
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    environ: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def descriptor(self, provider_id: str) -> Optional[ProviderDescriptor]:
        for d in self.descriptors:
            if d.id == provider_id:
                return d
        return None


def load_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return an environment snapshot with ``.env`` values merged in.

    With no ``environ`` the process environment is used and ``.env`` in the
    working directory is read. With an explicit mapping, a dotenv file is read
    only when the mapping names one via ``DOTENV_FILE``.
    """
    base = dict(os.environ if environ is None else environ)
    path = base.get(DOTENV_FILE_ENV) or (DEFAULT_DOTENV_FILE if environ is None else None)
    if not path or not os.path.isfile(path):
        return base
    for key, value in dotenv_values(path).items():
        if value is None:
            continue
        current = base.get(key)
        if current is None or not current.strip() or is_placeholder(current):
            base[key] = value
    return base


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load a JSON or YAML config file; missing path or file yields ``{}``.

    Raises:
        RegistryConfigError: if the file exists but is neither valid JSON nor
            valid YAML, or its top level is not a mapping.
    """
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        log_event(_logger, "config.file.missing", path=str(p))
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise RegistryConfigError(f"config file {p} is neither JSON nor YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise RegistryConfigError(f"config file {p} must contain a mapping at top level")
    return data


def _apply_file_section(entry: Dict[str, Any], section: Mapping[str, Any]) -> None:
    if "models" in section:
        entry["models"] = list(section["models"] or [])
    for key in ("model", "priority", "base_url", "credential_key"):
        if key in section:
            entry[key] = section[key]
    if "aliases" in section:
        entry["aliases"] = list(section["aliases"] or [])
    if "enabled" in section:
        entry["enabled"] = bool(section["enabled"])


def _apply_env(entry: Dict[str, Any], provider_id: str, environ: Mapping[str, str]) -> None:
    model = env_value(environ, provider_env_name(provider_id, MODEL_SUFFIX))
    if model:
        entry["model"] = model
        if model not in entry["models"]:
            entry["models"].append(model)
    base_url = env_value(environ, provider_env_name(provider_id, BASE_URL_SUFFIX))
    if base_url:
        entry["base_url"] = base_url
    if entry.get("opt_in") and (model or base_url):
        entry.setdefault("enabled", True)


def _select(catalog: Dict[str, Dict[str, Any]], environ: Mapping[str, str]) -> List[Tuple[str, Dict[str, Any]]]:
    requested = parse_provider_list(environ.get(AI_PROVIDER_ENV))
    if requested:
        selected = []
        for position, provider_id in enumerate(requested):
            entry = catalog.get(provider_id)
            if entry is None:
                log_event(_logger, "config.provider.unknown", provider=provider_id, source=AI_PROVIDER_ENV)
                continue
            entry["priority"] = position
            selected.append((provider_id, entry))
        return selected
    if is_truthy(environ.get(USE_MOCKS_ENV)):
        catalog["mock"]["enabled"] = True
    return [
        (provider_id, entry)
        for provider_id, entry in catalog.items()
        if entry.get("enabled", not entry.get("opt_in", False))
    ]


def _to_descriptor(provider_id: str, entry: Mapping[str, Any]) -> ProviderDescriptor:
    if entry.get("model") is None:
        raise RegistryConfigError(
            f"provider '{provider_id}' has no default model; set {provider_env_name(provider_id, MODEL_SUFFIX)}"
        )
    if entry.get("requires_base_url") and not entry.get("base_url"):
        raise RegistryConfigError(
            f"provider '{provider_id}' needs a base URL; set {provider_env_name(provider_id, BASE_URL_SUFFIX)}"
        )
    try:
        priority = int(entry.get("priority", 0))
    except (TypeError, ValueError) as exc:
        raise RegistryConfigError(f"provider '{provider_id}' has a non-integer priority") from exc
    return ProviderDescriptor(
        id=provider_id,
        credential_key=entry.get("credential_key"),
        default_model_id=str(entry["model"]),
        supported_model_ids=frozenset(str(m) for m in entry.get("models", [])),
        priority=priority,
        credential_aliases=tuple(entry.get("aliases", ())),
        base_url=entry.get("base_url"),
    )


def _timeouts(file_cfg: Mapping[str, Any], environ: Mapping[str, str]) -> TimeoutConfig:
    section = file_cfg.get(_TIMEOUTS_SECTION) or {}
    base = TimeoutConfig()
    if isinstance(section, dict):
        base = TimeoutConfig(
            start_timeout_seconds=float(section.get("start_seconds", base.start_timeout_seconds)),
            stream_timeout_seconds=float(section.get("stream_seconds", base.stream_timeout_seconds)),
        )
    return timeout_config_from_env(environ, base)


def load_gateway_config(
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[str] = None,
) -> GatewayConfig:
    """Build the immutable gateway configuration.

    Parameters
    ----------
    environ:
        Environment mapping to read instead of ``os.environ`` (tests).
    config_file:
        Path of a JSON/YAML file; defaults to ``GATEWAY_CONFIG_FILE``.

    Returns
    -------
    GatewayConfig
        Descriptors are not validated here; ``ProviderRegistry`` raises
        ``RegistryConfigError`` for an inconsistent catalog.
    """
    snapshot = load_environment(environ)
    file_cfg = load_config_file(config_file or snapshot.get(CONFIG_FILE_ENV))

    catalog = copy.deepcopy(DEFAULT_CATALOG)
    for section_name, section in file_cfg.items():
        if section_name == _TIMEOUTS_SECTION:
            continue
        entry = catalog.get(section_name)
        if entry is None or not isinstance(section, dict):
            log_event(_logger, "config.provider.unknown", provider=section_name, source="config_file")
            continue
        _apply_file_section(entry, section)

    for provider_id, entry in catalog.items():
        _apply_env(entry, provider_id, snapshot)

    descriptors = tuple(_to_descriptor(pid, entry) for pid, entry in _select(catalog, snapshot))
    return GatewayConfig(
        descriptors=descriptors,
        timeouts=_timeouts(file_cfg, snapshot),
        environ=MappingProxyType(snapshot),
    )


__all__ = [
    "GatewayConfig",
    "load_gateway_config",
    "load_environment",
    "load_config_file",
    "DEFAULT_CATALOG",
]

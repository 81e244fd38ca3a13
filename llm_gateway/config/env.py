"""llm_gateway.config.env
======================

Environment variable names and small helpers shared by the config loader
and the credential resolver.

Design Notes
------------
- Credential variable names live in the catalog (``config.defaults``); this
  module holds the variables that steer the loader itself.
- Helpers never raise on unset variables; callers decide how to proceed.
"""

from __future__ import annotations

from typing import List, Mapping, Optional

CONFIG_FILE_ENV = "GATEWAY_CONFIG_FILE"
DOTENV_FILE_ENV = "DOTENV_FILE"
DEFAULT_DOTENV_FILE = ".env"
AI_PROVIDER_ENV = "AI_PROVIDER"
USE_MOCKS_ENV = "GATEWAY_USE_MOCKS"

# <PROVIDER>_<SUFFIX> overrides applied on top of the catalog and config file
MODEL_SUFFIX = "MODEL"
BASE_URL_SUFFIX = "BASE_URL"


def provider_env_name(provider_id: str, suffix: str) -> str:
    """Return e.g. ``OPENAI_MODEL`` for ``("openai", "MODEL")``."""
    return f"{provider_id.upper().replace('-', '_')}_{suffix}"


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a sample/test credential.

    Heuristics: contains 'placeholder', 'changeme' or 'example', or starts
    with 'test_'. Case-insensitive and tolerant of surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def is_truthy(val: Optional[str]) -> bool:
    return (val or "").strip().lower() in {"1", "true", "yes", "on"}


def parse_provider_list(raw: Optional[str]) -> List[str]:
    """Parse ``AI_PROVIDER`` (``"openai, anthropic"``) into ordered ids.

    Blank entries and duplicates are dropped; order of first appearance wins.
    """
    out: List[str] = []
    for item in (raw or "").split(","):
        name = item.strip().lower()
        if name and name not in out:
            out.append(name)
    return out


def env_value(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Return the stripped value of ``name`` or ``None`` when unset/blank."""
    raw = environ.get(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


__all__ = [
    "CONFIG_FILE_ENV",
    "DOTENV_FILE_ENV",
    "DEFAULT_DOTENV_FILE",
    "AI_PROVIDER_ENV",
    "USE_MOCKS_ENV",
    "MODEL_SUFFIX",
    "BASE_URL_SUFFIX",
    "provider_env_name",
    "is_placeholder",
    "is_truthy",
    "parse_provider_list",
    "env_value",
]

"""llm_gateway.config.defaults
===========================

Built-in provider catalog and small service defaults. Everything here can be
overridden by the optional config file or by environment variables (see
``llm_gateway.config``).

Only plain constants live here; no I/O and no imports from other gateway
packages.
"""

from __future__ import annotations

from typing import Any, Dict

# ---- Service / HTTP layer ----

# Comma-separated list of allowed origins for the dev server.
GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"
GATEWAY_SERVICE_DEFAULT_HOST = "127.0.0.1"
GATEWAY_SERVICE_DEFAULT_PORT = 8000

# ---- Provider endpoints ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
GROQ_DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434/v1"

# ---- Default models ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
GOOGLE_DEFAULT_MODEL = "gemini-1.5-pro"
GROQ_DEFAULT_MODEL = "llama-3.3-70b-versatile"
OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
OLLAMA_DEFAULT_MODEL = "llama3.2"
MOCK_DEFAULT_MODEL = "mock-echo"

# Anthropic requires an explicit output cap on every request.
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

# Catalog entries. ``opt_in`` providers join the catalog only when selected
# explicitly: local/offline backends need no credential and would always be
# usable, and ``custom`` has no endpoint or model until one is configured.
# ``requires_base_url`` entries must end up with a ``base_url``.
DEFAULT_CATALOG: Dict[str, Dict[str, Any]] = {
    "openai": {
        "credential_key": "OPENAI_API_KEY",
        "model": OPENAI_DEFAULT_MODEL,
        "models": ["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-4", "gpt-3.5-turbo"],
        "priority": 0,
        "base_url": None,
    },
    "anthropic": {
        "credential_key": "ANTHROPIC_API_KEY",
        "model": ANTHROPIC_DEFAULT_MODEL,
        "models": [
            "claude-3-5-sonnet-20241022",
            "claude-3-5-haiku-20241022",
            "claude-3-opus-20240229",
            "claude-3-sonnet-20240229",
            "claude-3-haiku-20240307",
        ],
        "priority": 1,
        "base_url": None,
    },
    "google": {
        "credential_key": "GOOGLE_GENERATIVE_AI_API_KEY",
        "aliases": ["GOOGLE_API_KEY"],
        "model": GOOGLE_DEFAULT_MODEL,
        "models": ["gemini-2.0-flash-exp", "gemini-1.5-pro", "gemini-1.5-flash", "gemini-1.0-pro"],
        "priority": 2,
        "base_url": None,
    },
    "groq": {
        "credential_key": "GROQ_API_KEY",
        "model": GROQ_DEFAULT_MODEL,
        "models": ["llama-3.3-70b-versatile", "llama-3.1-70b-versatile", "mixtral-8x7b-32768", "gemma2-9b-it"],
        "priority": 3,
        "base_url": None,
    },
    "openrouter": {
        "credential_key": "OPENROUTER_API_KEY",
        "model": OPENROUTER_DEFAULT_MODEL,
        "models": [
            "openrouter/auto",
            "openai/gpt-4o-mini",
            "anthropic/claude-3.5-sonnet",
            "google/gemini-flash-1.5",
            "meta-llama/llama-3.3-70b-instruct",
        ],
        "priority": 4,
        "base_url": None,
    },
    "ollama": {
        "credential_key": None,
        "model": OLLAMA_DEFAULT_MODEL,
        "models": ["llama3.3", "llama3.2", "mistral", "codellama", "qwen2.5"],
        "priority": 5,
        "base_url": None,
        "opt_in": True,
    },
    "mock": {
        "credential_key": None,
        "model": MOCK_DEFAULT_MODEL,
        "models": [MOCK_DEFAULT_MODEL],
        "priority": 6,
        "base_url": None,
        "opt_in": True,
    },
    # Any OpenAI-compatible endpoint: CUSTOM_BASE_URL, CUSTOM_MODEL, CUSTOM_API_KEY
    "custom": {
        "credential_key": "CUSTOM_API_KEY",
        "model": None,
        "models": [],
        "priority": 7,
        "base_url": None,
        "opt_in": True,
        "requires_base_url": True,
    },
}

__all__ = [
    "GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS",
    "GATEWAY_SERVICE_DEFAULT_HOST",
    "GATEWAY_SERVICE_DEFAULT_PORT",
    "OPENAI_DEFAULT_BASE_URL",
    "GROQ_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "OLLAMA_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MODEL",
    "GOOGLE_DEFAULT_MODEL",
    "GROQ_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_MODEL",
    "MOCK_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "DEFAULT_CATALOG",
]

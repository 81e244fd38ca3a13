"""Pure helper functions shared by the base layer and backends."""

from .messages import last_user_text, split_system, to_core

__all__ = ["to_core", "split_system", "last_user_text"]

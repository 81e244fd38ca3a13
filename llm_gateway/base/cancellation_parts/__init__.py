"""Cancellation parts package; ``llm_gateway.base.cancellation`` is the public surface."""

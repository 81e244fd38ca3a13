"""FastAPI service exposing the gateway over HTTP."""

"""Provider-agnostic core of the gateway: models, errors, routing and streaming."""

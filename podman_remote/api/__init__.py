"""HTTP API layer: routes, schemas, middleware and exception handlers."""

"""API Layer — FastAPI routers, request dependencies and error handlers."""

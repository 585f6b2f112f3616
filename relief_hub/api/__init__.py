"""HTTP API: FastAPI app factory, auth dependencies, error handlers and routers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarHTTP

from .config import ConfigError
from .logging_config import log_failure, logger


def install_error_handlers(app: FastAPI) -> None:
    """
    HTTP-level error envelopes. JSON-RPC errors never reach these handlers;
    the dispatcher answers them inside the JSON-RPC envelope with status 200.
    """

    @app.exception_handler(StarHTTP)
    async def http_exc(_: Request, exc: StarHTTP):
        return JSONResponse({"error": f"HTTP_{exc.status_code}", "detail": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(ConfigError)
    async def config_exc(request: Request, exc: ConfigError):
        log_failure("CONFIG_INVALID", {"path": request.url.path, "detail": str(exc)})
        return JSONResponse({"error": "CONFIG_INVALID", "detail": str(exc)}, status_code=422)

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
        return JSONResponse({"error": "INTERNAL_ERROR", "detail": "Unexpected error"}, status_code=500)

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from domain.errors import NotFoundError

logger = logging.getLogger(__name__)

def attach_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        logger.info("Not found on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

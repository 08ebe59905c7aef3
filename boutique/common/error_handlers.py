from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from boutique.core.exceptions import BoutiqueError
from boutique.logger_config import logger


def register_error_handlers(app: FastAPI):
    @app.exception_handler(BoutiqueError)
    async def handle_domain_error(request: Request, e: BoutiqueError):
        logger.warning(f"{request.method} {request.url.path} rejected: {type(e).__name__}: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content={
                "success": False,
                "status_code": e.status_code,
                **e.to_dict(),
            },
        )

    @app.exception_handler(Exception)
    async def handle_exception(request: Request, e: Exception):
        # Log the exception with traceback
        logger.exception("Unhandled exception occurred")

        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Internal Server Error",
                "details": str(e),
                "status_code": 500,
            },
        )

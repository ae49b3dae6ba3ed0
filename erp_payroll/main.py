"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from erp_payroll.core import get_logger
from erp_payroll.core.errors import PayrollError
from erp_payroll.routers import deductions_router, payroll_router

LOGGER = get_logger(__name__)

API_PREFIX = "/api/v1"


async def handle_payroll_error(request: Request, exc: PayrollError) -> JSONResponse:
    """Render a ``PayrollError`` as ``{"error": code, "detail": message}``."""

    if exc.status_code >= 500:
        LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        LOGGER.info(
            "%s %s rejected with %s: %s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="ERP Payroll", version="0.1.0")
    app.add_exception_handler(PayrollError, handle_payroll_error)
    app.include_router(payroll_router, prefix=API_PREFIX)
    app.include_router(deductions_router, prefix=API_PREFIX)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("erp_payroll.main:app", host="0.0.0.0", port=8000)

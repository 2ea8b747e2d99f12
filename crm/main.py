# crm/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from crm.api.auth import router as auth_router
from crm.api.client_children import router as client_children_router
from crm.api.clients import router as clients_router
from crm.api.dashboard import router as dashboard_router
from crm.api.health import router as health_router
from crm.api.notifications import router as notifications_router
from crm.api.publications import router as publications_router
from crm.api.tasks import router as tasks_router
from crm.api.users import router as users_router
from crm.core.config import settings
from crm.core.errors import DomainError
from crm.core.logging import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    description=settings.api_description,
)

PUBLIC_PATHS = ["/health", "/auth/register", "/auth/login"]


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schemes = schema["components"]["securitySchemes"]

    schemes["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "description": "Session token from /auth/login or /auth/register.",
    }

    # Apply globally; public endpoints opt out below.
    schema["security"] = [{"BearerAuth": []}]

    for path in PUBLIC_PATHS:
        if path in schema.get("paths", {}):
            for _method, op in schema["paths"][path].items():
                if isinstance(op, dict):
                    op["security"] = []

    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi

app.include_router(health_router, tags=["health"])
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(clients_router)
app.include_router(client_children_router)
app.include_router(tasks_router)
app.include_router(notifications_router)
app.include_router(publications_router)
app.include_router(dashboard_router)

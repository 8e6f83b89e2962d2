from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="POSBAKUM Queue API",
            version="0.1.0",
            summary="Walk-in queue tickets for the legal aid post",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Staff bearer token authentication (preferred)",
            },
            "AuthTokenCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "auth_token",
                "description": "Staff authentication token stored in cookie",
            },
        }

        # Only the staff console endpoints require authentication
        for path, path_item in openapi_schema["paths"].items():
            if not path.startswith("/api/v1/admin") and path != "/api/v1/auth/logout":
                continue
            for operation in path_item.values():
                operation["security"] = [{"BearerAuth": []}, {"AuthTokenCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "authentication_error"},
                {"message": "Ticket not found", "type": "not_found"},
                {"message": "Ticket A-007 is no longer menunggu (currently dipanggil)", "type": "conflict"},
            ]
        }
    }

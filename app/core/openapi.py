"""OpenAPI metadata customization.

Adds tag descriptions to the generated schema and documents the 429 response
of the registration endpoint, keeping documentation concerns out of the app
factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Registration",
        "description": "Event registration submissions (rate limited per email).",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and error responses.

    - Adds tags metadata if not present
    - Documents 400/429 responses (with the Retry-After header) on
      registration operations
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if not path.endswith("/registrations"):
                continue
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                responses = method_obj.setdefault("responses", {})
                responses.setdefault(
                    "400",
                    {"description": "Missing fields or invalid email address."},
                )
                responses.setdefault(
                    "429",
                    {
                        "description": "Hourly or daily submission limit exceeded.",
                        "headers": {
                            "Retry-After": {
                                "description": "Seconds until a retry may succeed.",
                                "schema": {"type": "integer"},
                            }
                        },
                    },
                )

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]

"""Public, key-gated feed of published blogs."""

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import ORJSONResponse

from blogcore.dependencies import ServicesDep

router = APIRouter(tags=["🌐 Public API"])


@router.get(
    "/api",
    response_class=ORJSONResponse,
    summary="Published blogs feed",
    description=(
        "Every published blog across all authors. Requires a valid `apiKey`. "
        "Always answers 200; a refused key is reported in the body."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "examples": {
                        "ok": {"value": {"success": True, "data": []}},
                        "missing": {"value": {"success": False, "error": "API key is required"}},
                        "invalid": {"value": {"success": False, "error": "Invalid API key"}},
                    },
                },
            },
        },
    },
    operation_id="public_feed",
)
async def public_feed(
    services: ServicesDep,
    api_key: Annotated[str | None, Query(alias="apiKey")] = None,
) -> ORJSONResponse:
    """
    Serve the published feed to an API key holder.

    Each accepted request adds one to the key holder's request count.
    """
    feed = await services.gateway.handle(api_key)
    return ORJSONResponse(feed.model_dump(mode="json", by_alias=True))

"""Autosave preference routes."""

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from blogcore.configs import AUTOSAVE_PRESETS
from blogcore.dependencies import ActiveUserDep, ServicesDep
from blogcore.schemas import AutosaveConfig, AutosaveConfigResponse

router = APIRouter(prefix="/settings", tags=["⚙️ Settings"])


def with_presets(config: AutosaveConfig) -> AutosaveConfigResponse:
    return AutosaveConfigResponse(
        enabled=config.enabled,
        interval_seconds=config.interval_seconds,
        presets=list(AUTOSAVE_PRESETS),
    )


@router.get(
    "/autosave",
    response_class=ORJSONResponse,
    response_model=AutosaveConfigResponse,
    summary="Get autosave settings",
    operation_id="settings_autosave_get",
)
async def get_autosave(user: ActiveUserDep, services: ServicesDep) -> AutosaveConfigResponse:
    return with_presets(services.editors.config)


@router.put(
    "/autosave",
    response_class=ORJSONResponse,
    response_model=AutosaveConfigResponse,
    summary="Update autosave settings",
    description=(
        "Store the autosave preference and apply it to every open editor. "
        "Any positive interval is accepted; the presets are suggestions."
    ),
    operation_id="settings_autosave_put",
)
async def put_autosave(
    config: AutosaveConfig,
    user: ActiveUserDep,
    services: ServicesDep,
) -> AutosaveConfigResponse:
    return with_presets(await services.save_autosave_config(config))

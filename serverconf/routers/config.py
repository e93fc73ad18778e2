from fastapi import APIRouter, HTTPException  # type: ignore[import-not-found]
from fastapi.responses import Response  # type: ignore[import-not-found]

from ..errors import ConfigError
from ..models import ConfigPersistResponse, ConfigReloadResponse, ServerIdResponse
from ..services.config_manager import config_manager
from ..services.documents import render_xml


router = APIRouter(prefix="/config", tags=["config"])


def _ensure_loaded() -> None:
    if not config_manager.is_loaded:
        raise HTTPException(status_code=503, detail="Configurations have not been loaded yet")


def _config_error(exc: ConfigError) -> HTTPException:
    return HTTPException(status_code=409, detail=exc.to_payload())


@router.get("")
async def get_current_config():
    _ensure_loaded()
    return config_manager.get_current_config_as_json()


@router.get("/xml")
async def get_current_config_xml():
    _ensure_loaded()
    document = config_manager.get_current_config_as_xml()
    content = '<?xml version="1.0" encoding="utf-8"?>\n' + render_xml(document)
    return Response(content=content, media_type="application/xml")


@router.get("/server-id", response_model=ServerIdResponse)
async def get_server_id():
    _ensure_loaded()
    return ServerIdResponse(server_id=config_manager.server_id or "")


@router.post("/reload", response_model=ConfigReloadResponse)
async def reload_config():
    _ensure_loaded()
    try:
        config_manager.reload_configs()
    except ConfigError as exc:
        raise _config_error(exc)
    return ConfigReloadResponse(
        config_path=str(config_manager.config_path),
        server_id=config_manager.server_id or "",
    )


@router.post("/persist", response_model=ConfigPersistResponse)
async def persist_config():
    _ensure_loaded()
    try:
        path = config_manager.save_current_config_to_default()
    except ConfigError as exc:
        raise _config_error(exc)
    return ConfigPersistResponse(path=str(path))

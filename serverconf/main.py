from contextlib import asynccontextmanager

from fastapi import FastAPI, APIRouter  # type: ignore[import-not-found]

from . import __version__
from .config import config
from .logging_config import setup_logging
from .routers import config as config_router


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    from .services.config_manager import config_manager
    from .services.logger_config_watcher import logger_config_watcher

    # A ConfigError here aborts startup.
    config_manager.load_configs(config.SYSTEM.CONFIG_DIR)
    logger_config_watcher.start()
    try:
        yield
    finally:
        logger_config_watcher.stop()
        config_manager.logging_backend.close()

app = FastAPI(
    title="serverconf",
    description="Configuration lifecycle API of the media server.",
    version=__version__,
    lifespan=lifespan
)

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(config_router.router)
app.include_router(v1_router)

@app.get("/")
async def root():
    return {"message": "serverconf is running"}

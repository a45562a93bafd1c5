from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import settings
from .db import get_store
from .repos.settings_repo import SettingsStore
from .services.notifications import Notifier
from .routers.prices import router as prices_router
from .routers.favorites import router as favorites_router
from .routers.settings import router as settings_router
from .utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # user settings are loaded once here and changed only through the store
    settings_store = SettingsStore(get_store())
    settings_store.load()
    app.state.settings_store = settings_store
    app.state.notifier = Notifier(settings_store)
    logger.info(f"BTC Tracker API started (storage={settings.storage_backend})")
    yield
    logger.info("BTC Tracker API shutting down")


app = FastAPI(title="BTC Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
def health():
    return {"status": "ok"}

app.include_router(prices_router)
app.include_router(favorites_router)
app.include_router(settings_router)

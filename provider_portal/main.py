from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from provider_portal.config import settings
from provider_portal.database import engine
from provider_portal.middleware.exceptions import register_exception_handlers
from provider_portal.routers import health, profiles, public, wizard
from provider_portal.utils.cache import close_redis


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title="Provider Portal",
    description="Provider profile wizard, preview and public profile publishing",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
# Anonymous
app.include_router(health.router)
app.include_router(public.router, prefix="/api/public", tags=["public"])

# Signed-in provider
app.include_router(wizard.router, prefix="/api/wizard", tags=["wizard"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])

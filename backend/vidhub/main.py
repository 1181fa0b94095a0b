# vidhub/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vidhub.config import settings
from vidhub.core.db import init_db, close_db
from vidhub.core.errors import register_error_handlers

from vidhub.api.v1.routers import users

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# ApiError / validation / HTTP error envelopes + catch-all 500 middleware.
# Must stay above CORSMiddleware: CORS has to wrap the 500 envelope too.
register_error_handlers(app)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    logger.info("[startup] %s (env=%s)", settings.APP_NAME, settings.env)
    await init_db()


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()


# REST
app.include_router(users.router, prefix="/api/v1")


@app.get("/healthz")
def healthz():
    return {"ok": True}

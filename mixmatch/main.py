import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from mixmatch.core.config import settings
from mixmatch.routers import feed, health, outfits, promotions
from mixmatch.services.catalog import build_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.catalog_store = build_store()
    app.state.catalog_service = None
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
origins = settings.cors_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins if origins != ["*"] else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

prefix = settings.API_PREFIX
app.include_router(health.router, prefix=prefix)
app.include_router(outfits.router, prefix=prefix)
app.include_router(feed.router, prefix=prefix)
app.include_router(promotions.router, prefix=prefix)

logger = logging.getLogger("mixmatch.requests")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "env": settings.APP_ENV}

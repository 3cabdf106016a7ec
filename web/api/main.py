"""FastAPI app for the Conduit auth and statistics API."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from conduit.errors import ConduitError
from conduit.models.base import init_db

from web.api.auth_routes import router as auth_router
from web.api.routes import router as stats_router

logger = logging.getLogger("conduit.http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="Conduit Auth & Stats API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router)
app.include_router(stats_router)


@app.exception_handler(ConduitError)
async def conduit_error_handler(request: Request, exc: ConduitError):
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.kind)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/api/health")
async def health():
    return {"status": "ok"}

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from core import config, db
from core.errors import http_exception_handler
from query import router as query_router
from rest import router as rest_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # Fail fast if the secret is missing; it is cached for the process from here on.
    config.api_secret()
    # Initialize the DB pool once per process.
    await db.init_pool()
    logger.info("startup_complete")
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allow_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)

# Login must be registered before the generic /rest/{table}/{row_id} route.
app.include_router(auth_router.router, tags=["auth"])
app.include_router(query_router.router, tags=["query"])
app.include_router(rest_router.router, tags=["rest"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

import traceback

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
import models  # registers every table on Base.metadata
from database import Base, engine
from utils.logger import setup_api_logger

from routes import (
    auth,
    trips,
    journal,
    packing,
    itinerary,
    stats,
    media,
)

API_PREFIX = "/api/v1"

Base.metadata.create_all(bind=engine)

app = FastAPI(title="JourneyStack API (Auth, Trips, Journal, Packing, Itinerary, Media)", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_logger = setup_api_logger()


def check_jwt_secret() -> bool:
    """Warn when tokens would be signed with the built-in development key."""
    if config.JWT_SECRET == config.DEFAULT_JWT_SECRET:
        api_logger.warning("JWT_SECRET is not set; tokens are signed with the built-in development key")
        return False
    return True


check_jwt_secret()


async def _request_body(request: Request) -> str:
    try:
        body = await request.body()
    except Exception:
        body = b""
    return body.decode('utf-8', errors='replace')


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    api_logger.error("Unhandled exception on %s %s | body=%s | error=%s\n%s",
                     request.method, request.url.path, await _request_body(request), str(exc),
                     "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    api_logger.warning("HTTPException on %s %s | status=%s | detail=%s",
                       request.method, request.url.path, exc.status_code, str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail},
                        headers=getattr(exc, "headers", None))


@app.get("/")
def root():
    return {"name": "JourneyStack API", "status": "ok"}


app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(trips.router, prefix=API_PREFIX)
app.include_router(journal.router, prefix=API_PREFIX)
app.include_router(journal.router2, prefix=API_PREFIX)
app.include_router(packing.router, prefix=API_PREFIX)
app.include_router(itinerary.router, prefix=API_PREFIX)
app.include_router(stats.router, prefix=API_PREFIX)
app.include_router(media.router, prefix=API_PREFIX)
app.include_router(media.router2, prefix=API_PREFIX)


if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))

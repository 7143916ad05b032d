from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, ORJSONResponse
from mangum import Mangum
from pydantic import ValidationError

from thirtytoday.config import get_settings
from thirtytoday.http_client import shutdown_http_client
from thirtytoday.models import ArchiveDocument
from thirtytoday.services import GeolocationService, build_page
from thirtytoday.store import load_document
from thirtytoday.templates import render_page

logger = logging.getLogger(__name__)

app = FastAPI(
    title="thirty-today",
    version="0.1.0",
    description="News, events and weather from the United States and the United Kingdom, 30 years ago today.",
    default_response_class=ORJSONResponse,
)


def get_geolocation_service() -> GeolocationService:
    return GeolocationService()


def get_document() -> ArchiveDocument:
    path = get_settings().data_path
    try:
        return load_document(path)
    except FileNotFoundError:
        logger.error("Archive document %s has not been generated yet", path)
        raise HTTPException(status_code=503, detail="Archive not available") from None
    except ValidationError as exc:
        logger.error("Archive document %s is unreadable: %s", path, exc)
        raise HTTPException(status_code=503, detail="Archive not available") from None


def client_address(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse, tags=["page"])
async def index(
    request: Request,
    document: ArchiveDocument = Depends(get_document),
    geolocation: GeolocationService = Depends(get_geolocation_service),
) -> HTMLResponse:
    viewer_timezone = await geolocation.lookup_timezone(client_address(request))
    view = build_page(document, viewer_timezone, years=get_settings().years_back)
    return HTMLResponse(render_page(view))


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await shutdown_http_client()


handler = Mangum(app)

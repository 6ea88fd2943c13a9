"""
FastAPI application entry point.

Wires up the service layer and exposes the risk assessment,
risk configuration, client, document, and dashboard endpoints.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from pathlib import Path

import uvicorn
from fastapi import Body, Depends, FastAPI, File, HTTPException, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from loguru import logger

from riskdesk.config import get_settings
from riskdesk.exceptions import RiskDeskError
from riskdesk.logging_setup import configure_logging
from riskdesk.schemas import (
    ClientCreate,
    ClientProfile,
    ClientUpdate,
    ClientView,
    DashboardSummary,
    Document,
    RiskAssessment,
    RiskBand,
    RiskConfig,
)
from riskdesk.services import portfolio_summary, risk_engine
from riskdesk.services.client_registry import ClientRegistry, to_view
from riskdesk.services.config_store import RiskConfigStore
from riskdesk.services.document_store import DocumentStore
from riskdesk.utils.dates import utcnow

APP_VERSION = "1.0.0"

settings = get_settings()

_config_store = RiskConfigStore()
_client_registry = ClientRegistry()
_document_store = DocumentStore(settings.upload_dir, settings.max_upload_bytes)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info(f"riskdesk {APP_VERSION} started, uploads in {settings.upload_dir}")
    yield


app = FastAPI(
    title="riskdesk Compliance Risk Service",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RiskDeskError)
async def handle_riskdesk_error(request, exc: RiskDeskError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})


# -- Dependencies ------------------------------------------------------------

def get_config_store() -> RiskConfigStore:
    return _config_store


def get_client_registry() -> ClientRegistry:
    return _client_registry


def get_document_store() -> DocumentStore:
    return _document_store


def get_clock() -> Callable[[], datetime]:
    return utcnow


# -- Health & assessment -----------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "ok", "version": APP_VERSION}


@app.post("/assess", response_model=RiskAssessment)
async def assess(
    profile: ClientProfile,
    store: RiskConfigStore = Depends(get_config_store),
):
    """Score a profile against the current ruleset without storing anything."""
    return risk_engine.evaluate(profile, store.load())


# -- Risk configuration ------------------------------------------------------

@app.get("/risk-config", response_model=RiskConfig)
async def read_risk_config(store: RiskConfigStore = Depends(get_config_store)):
    return store.load()


@app.put("/risk-config", response_model=RiskConfig)
async def update_risk_config(
    payload: dict[str, Any] = Body(...),
    store: RiskConfigStore = Depends(get_config_store),
):
    """
    Merge a partial ruleset into the stored one.

    The body is validated by the store so every rejected write answers
    with the same ``RISK_CONFIG_INVALID`` error body.
    """
    return store.update(payload)


@app.post("/risk-config/reset", response_model=RiskConfig)
async def reset_risk_config(store: RiskConfigStore = Depends(get_config_store)):
    return store.reset()


@app.post("/risk-config/high-risk-countries/{country}", response_model=RiskConfig)
async def add_high_risk_country(country: str, store: RiskConfigStore = Depends(get_config_store)):
    return store.add_high_risk_country(country)


@app.delete("/risk-config/high-risk-countries/{country}", response_model=RiskConfig)
async def remove_high_risk_country(country: str, store: RiskConfigStore = Depends(get_config_store)):
    return store.remove_high_risk_country(country)


@app.post("/risk-config/high-risk-industries/{industry}", response_model=RiskConfig)
async def add_high_risk_industry(industry: str, store: RiskConfigStore = Depends(get_config_store)):
    return store.add_high_risk_industry(industry)


@app.delete("/risk-config/high-risk-industries/{industry}", response_model=RiskConfig)
async def remove_high_risk_industry(industry: str, store: RiskConfigStore = Depends(get_config_store)):
    return store.remove_high_risk_industry(industry)


@app.post("/risk-config/cash-intensive-jobs/{job}", response_model=RiskConfig)
async def add_cash_intensive_job(job: str, store: RiskConfigStore = Depends(get_config_store)):
    return store.add_cash_intensive_job(job)


@app.delete("/risk-config/cash-intensive-jobs/{job}", response_model=RiskConfig)
async def remove_cash_intensive_job(job: str, store: RiskConfigStore = Depends(get_config_store)):
    return store.remove_cash_intensive_job(job)


# -- Clients -----------------------------------------------------------------

@app.get("/clients", response_model=list[ClientView])
async def list_clients(
    risk_band: str | None = None,
    search: str | None = None,
    registry: ClientRegistry = Depends(get_client_registry),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    band = None
    if risk_band and risk_band.upper() != "ALL":
        try:
            band = RiskBand(risk_band.upper())
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown risk band: '{risk_band}'. Allowed: ALL, {', '.join(b.value for b in RiskBand)}",
            )
    now = clock()
    return [to_view(c, now) for c in registry.list(risk_band=band, search=search)]


@app.get("/clients/{client_id}", response_model=ClientView)
async def read_client(
    client_id: str,
    registry: ClientRegistry = Depends(get_client_registry),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return to_view(registry.get(client_id), clock())


@app.post("/clients", response_model=ClientView, status_code=201)
async def create_client(
    payload: ClientCreate,
    registry: ClientRegistry = Depends(get_client_registry),
    store: RiskConfigStore = Depends(get_config_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    client = registry.create(payload, store.load())
    return to_view(client, clock())


@app.put("/clients/{client_id}", response_model=ClientView)
async def update_client(
    client_id: str,
    payload: ClientUpdate,
    registry: ClientRegistry = Depends(get_client_registry),
    store: RiskConfigStore = Depends(get_config_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    client = registry.update(client_id, payload, store.load())
    return to_view(client, clock())


@app.post("/clients/{client_id}/reassess", response_model=ClientView)
async def reassess_client(
    client_id: str,
    registry: ClientRegistry = Depends(get_client_registry),
    store: RiskConfigStore = Depends(get_config_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    client = registry.reassess(client_id, store.load())
    return to_view(client, clock())


@app.delete("/clients/{client_id}", status_code=204)
async def delete_client(
    client_id: str,
    registry: ClientRegistry = Depends(get_client_registry),
    documents: DocumentStore = Depends(get_document_store),
):
    registry.delete(client_id)
    documents.delete_for_client(client_id)
    return Response(status_code=204)


# -- Documents ---------------------------------------------------------------

@app.get("/clients/{client_id}/documents", response_model=list[Document])
async def list_documents(
    client_id: str,
    registry: ClientRegistry = Depends(get_client_registry),
    documents: DocumentStore = Depends(get_document_store),
):
    registry.get(client_id)
    return documents.list_for_client(client_id)


@app.post("/clients/{client_id}/documents", response_model=Document, status_code=201)
async def upload_document(
    client_id: str,
    file: UploadFile = File(...),
    registry: ClientRegistry = Depends(get_client_registry),
    documents: DocumentStore = Depends(get_document_store),
):
    """Attach a PDF, JPEG or PNG file to a client."""
    registry.get(client_id)
    content = await file.read()
    return documents.save(client_id, file.filename or "", file.content_type or "", content)


@app.get("/clients/{client_id}/documents/{document_id}/download")
async def download_document(
    client_id: str,
    document_id: str,
    documents: DocumentStore = Depends(get_document_store),
):
    document = documents.get(client_id, document_id)
    path = documents.file_path(client_id, document_id)
    return FileResponse(str(path), media_type=document.type, filename=document.name)


@app.delete("/clients/{client_id}/documents/{document_id}", status_code=204)
async def delete_document(
    client_id: str,
    document_id: str,
    documents: DocumentStore = Depends(get_document_store),
):
    documents.delete(client_id, document_id)
    return Response(status_code=204)


# -- Dashboard ---------------------------------------------------------------

@app.get("/dashboard/summary", response_model=DashboardSummary)
async def dashboard_summary(
    registry: ClientRegistry = Depends(get_client_registry),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return portfolio_summary.summarize(registry.list(), clock())


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run("riskdesk.main:app", host=settings.host, port=settings.port)

"""
AmCup Points Tracker - FastAPI web server

Scrapes event results, caches them per event slot, merges the cached
events into season standings and exports them as PDF / Excel.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from loguru import logger

from database.event_store import EventStore
from ranking import InvalidRaceResultError, calculate_combination_standings
from ranking.models import TIERS
from scraper import ScraperError
from scraper.config import server_config
from app.season import load_event, season_standings, select_events
from app.views import REPORTS, ViewState, build_standings_view
from app.exports import EXPORT_TYPES, ExportError, build_pdf, build_workbook

PROJECT_ROOT = Path(__file__).parent.parent
TEMPLATES_DIR = PROJECT_ROOT / "templates"

PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

app = FastAPI(
    title="AmCup Points Tracker",
    description="US Speedskating AmCup season standings",
    version="1.0.0"
)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_event_store: Optional[EventStore] = None


def get_event_store() -> EventStore:
    """Shared event cache"""
    global _event_store
    if _event_store is None:
        _event_store = EventStore()
    return _event_store


# ==================== Pydantic Models ====================

class ScrapeEventRequest(BaseModel):
    eventId: Optional[Union[str, int]] = None
    eventName: Optional[str] = None
    slot: Optional[str] = None
    forceRefresh: bool = False


class StandingsRequest(BaseModel):
    events: Optional[List[str]] = Field(None, description="Slots to merge, default all cached")


class ExportOptions(BaseModel):
    type: str = "full"
    eventName: Optional[str] = None


class SkaterStandings(BaseModel):
    """One competitor's ledger entry"""
    name: str
    category: str = "Unknown"
    distances: Dict[str, Dict[str, int]]
    totalPoints: int = 0


class CombinationEntry(BaseModel):
    """One competitor's line in a combination or distance ranking"""
    name: str
    category: str = "Unknown"
    points: int
    details: Dict[str, Dict[str, int]] = Field(default_factory=dict)


# tier -> name -> entry
StandingsPayload = TypeAdapter(Dict[str, Dict[str, SkaterStandings]])
# tier -> combination -> gender -> entries
CombinationsPayload = TypeAdapter(Dict[str, Dict[str, Dict[str, List[CombinationEntry]]]])


class ExportRequest(BaseModel):
    standings: Dict[str, Any]
    combinations: Optional[Dict[str, Any]] = None
    exportOptions: ExportOptions = Field(default_factory=ExportOptions)


# ==================== API ====================

@app.on_event("startup")
async def startup_event():
    cached = get_event_store().list_events()
    logger.info(f"Server started - {len(cached)} cached events")


@app.get("/api/status")
async def api_status(store: EventStore = Depends(get_event_store)):
    events = store.list_events()
    return {
        "status": "ok",
        "cached_events": [
            {
                "slot": e.get("slot"),
                "eventId": e.get("eventId"),
                "eventName": e.get("eventName"),
                "results": len(e.get("results", [])),
                "scraped_at": e.get("scraped_at"),
            }
            for e in events
        ],
    }


@app.post("/api/scrape-event")
async def api_scrape_event(body: ScrapeEventRequest, store: EventStore = Depends(get_event_store)):
    """Scrape (or load from cache) one event and compute its standings"""
    event_id = str(body.eventId).strip() if body.eventId is not None else ""
    event_name = (body.eventName or "").strip()
    if not event_id or not event_name:
        raise HTTPException(status_code=400, detail="Event ID and name are required")

    try:
        return await load_event(store, event_id, event_name, body.slot, body.forceRefresh)
    except ScraperError as e:
        logger.error(f"Error in scrape-event: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except InvalidRaceResultError as e:
        logger.error(f"Error in scrape-event: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/standings")
async def api_standings(body: Optional[StandingsRequest] = None, store: EventStore = Depends(get_event_store)):
    """Season standings from the cached events"""
    events = select_events(store.list_events(), body.events if body else None)
    if not events:
        raise HTTPException(status_code=400, detail="Please fetch at least one event before calculating standings")

    return season_standings(events)


@app.delete("/api/cache")
async def api_clear_cache(store: EventStore = Depends(get_event_store)):
    return {"success": True, "removed": store.clear()}


def _export_inputs(body: ExportRequest) -> tuple:
    """Validated standings + combinations as plain dicts"""
    missing = [tier for tier in TIERS if tier not in body.standings]
    if missing:
        raise HTTPException(status_code=400, detail=f"Standings missing tiers: {', '.join(missing)}")

    try:
        standings = StandingsPayload.dump_python(StandingsPayload.validate_python(body.standings))
        combinations = None
        if body.combinations:
            combinations = CombinationsPayload.dump_python(CombinationsPayload.validate_python(body.combinations))
    except ValidationError as e:
        logger.warning(f"Rejected export payload: {e.error_count()} errors")
        raise HTTPException(status_code=400, detail=f"Invalid standings payload: {e.errors()[0]['msg']}")

    return standings, combinations or calculate_combination_standings(standings)


@app.post("/api/generate-pdf")
async def api_generate_pdf(body: ExportRequest):
    standings, combinations = _export_inputs(body)
    try:
        content = build_pdf(standings, combinations, body.exportOptions.type)
    except ExportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=amcup-standings.pdf"},
    )


@app.post("/api/generate-excel")
async def api_generate_excel(body: ExportRequest):
    standings, combinations = _export_inputs(body)
    try:
        content = build_workbook(standings, combinations, body.exportOptions.type)
    except ExportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=amcup-standings.xlsx"},
    )


# ==================== Pages ====================

@app.get("/", response_class=HTMLResponse)
async def standings_page(
    request: Request,
    category: str = Query("overall"),
    report: str = Query("sprint"),
    gender: str = Query("all"),
    store: EventStore = Depends(get_event_store),
):
    """Season standings page"""
    try:
        state = ViewState(category=category, report=report, gender=gender)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    events = store.list_events()
    season = season_standings(events) if events else {"standings": None, "combinations": None, "events": []}
    view = build_standings_view(season["standings"], season["combinations"], state)

    return templates.TemplateResponse(request, "standings.html", {
        "title": "AmCup Points Tracker",
        "season_title": server_config.season_title,
        "view": view,
        "events": season["events"],
        "tiers": TIERS,
        "reports": REPORTS,
        "genders": ["all", "men", "women"],
        "export_types": EXPORT_TYPES,
    })


# ==================== Run server ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.server:app",
        host=server_config.host,
        port=server_config.port,
        reload=True,
        log_level="info"
    )

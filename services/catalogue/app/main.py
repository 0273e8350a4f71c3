"""
    Catalogue Service API

    This module implements a FastAPI-based service for the Terreins motorcycle
    parts catalogue. It manages parts held in memory (stock, price, description,
    stock history and sales log) and serves the dashboard, sales summary and
    end-of-day reports computed from them.

    The service exposes:
    - CRUD endpoints for parts, plus stock adjustments and dispatch logging
    - Report endpoints: dashboard metrics, period sales summary, end-of-day report
    - AI assist endpoints backed by the Gemini API
    - CSV export of the catalogue
    - Health endpoint: Provides service health status for monitoring and orchestration

    State lives in an InventoryStore owned by the application and is lost on restart.
    The view state (selected part, part being edited) is one CatalogueSession per
    application, shared by every client: a part opened by one caller is the
    selection every caller sees.
"""
import csv
import io
import logging
from datetime import datetime
from typing import Callable, List, Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from . import config, filters, reports, schemas
from .callbacks import CatalogueSession
from .clients import genai_client
from .errors import DeletionNotConfirmedError, PartNotFoundError, PartValidationError
from .sample_data import sample_inventory
from .store import InventoryStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> InventoryStore:
    """
    Dependency function that provides the application's inventory store.

    Usage:
        Use as a FastAPI dependency to inject the store into route handlers.
    """
    return request.app.state.store


def get_session(request: Request) -> CatalogueSession:
    return request.app.state.session


def _require_part(store: InventoryStore, part_id: str) -> schemas.Part:
    part = store.get(part_id)
    if part is None:
        raise HTTPException(status_code=404, detail="Part not found")
    return part


def _listing(part: schemas.Part) -> schemas.PartListing:
    return schemas.PartListing(**part.model_dump(), low_stock=reports.is_low_stock(part))


@router.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the catalogue service.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): "healthy" if the service is operational.

    Example:
        GET /healthz
        Response: {"status": "healthy"}
    """
    return {"status": "healthy"}


@router.get("/categories", response_model=List[str])
def list_categories():
    """List part categories in menu order."""
    return [category.value for category in schemas.CATEGORIES]


@router.get("/parts", response_model=List[schemas.PartListing])
def list_parts(
    search: str = "",
    category: str = schemas.ALL_CATEGORIES,
    store: InventoryStore = Depends(get_store),
):
    """
    List parts, newest first, filtered by a search term and a category.

    Args:
        search: Text matched case-insensitively against name and SKU
        category: Category name, or "All"
        store: Inventory store (injected)

    Returns:
        List of parts flagged with ``low_stock``

    Raises:
        HTTPException: 400 if the category is unknown
    """
    if category != schemas.ALL_CATEGORIES and category not in schemas.CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown category '{category}'")
    parts = filters.filter_parts(store.query(), search, category)
    return [_listing(part) for part in parts]


@router.post("/parts", response_model=schemas.Part, status_code=status.HTTP_201_CREATED)
def create_part(
    draft: schemas.PartDraft,
    session: CatalogueSession = Depends(get_session),
):
    """
    Add a new part to the catalogue.

    Returns:
        Created part with its id, date added and opening stock history

    Raises:
        HTTPException: 422 if a required field is empty
    """
    return session.on_create(draft)


@router.get("/parts/{part_id}", response_model=schemas.Part)
def view_part(
    part_id: str,
    store: InventoryStore = Depends(get_store),
    session: CatalogueSession = Depends(get_session),
):
    """
    Open a single part and make it the selected one.

    Raises:
        HTTPException: 404 if part not found
    """
    part = _require_part(store, part_id)
    session.on_view(part)
    return part


@router.get("/parts/{part_id}/edit", response_model=schemas.Part)
def edit_part(
    part_id: str,
    store: InventoryStore = Depends(get_store),
    session: CatalogueSession = Depends(get_session),
):
    """Load a part into the edit form."""
    part = _require_part(store, part_id)
    session.on_edit(part)
    return part


@router.put("/parts/{part_id}", response_model=schemas.Part)
def save_part(
    part_id: str,
    draft: schemas.PartDraft,
    store: InventoryStore = Depends(get_store),
    session: CatalogueSession = Depends(get_session),
):
    """
    Save an edited part.

    An unknown id is created with that id. Changing the stock level appends
    a stock history entry; the sales log is never touched by a save.

    Raises:
        HTTPException: 422 if a required field is empty
    """
    existing = store.get(part_id)
    date_added = existing.date_added if existing is not None else store.now()
    part = schemas.Part(**draft.model_dump(), id=part_id, date_added=date_added)
    return session.on_save(part)


@router.delete("/parts/{part_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_part(
    part_id: str,
    confirm: bool = False,
    session: CatalogueSession = Depends(get_session),
):
    """
    Delete a part. The caller must pass ``confirm=true``.

    Deleting an unknown id is not an error.

    Raises:
        HTTPException: 400 if the deletion was not confirmed
    """
    session.on_delete(part_id, confirmed=confirm)


@router.get("/selection", response_model=Optional[schemas.Part])
def get_selection(session: CatalogueSession = Depends(get_session)):
    """Return the part currently opened in the single item view, if any."""
    return session.selected_part


@router.delete("/selection", status_code=status.HTTP_204_NO_CONTENT)
def clear_selection(session: CatalogueSession = Depends(get_session)):
    session.back_to_list()


@router.post("/parts/{part_id}/stock-adjustments", response_model=schemas.Part)
def adjust_stock(
    part_id: str,
    adjustment: schemas.StockAdjustment,
    store: InventoryStore = Depends(get_store),
):
    """
    Add or remove stock. Removing more than is on hand leaves zero.

    Raises:
        HTTPException: 404 if part not found
    """
    delta = adjustment.amount if adjustment.direction == "add" else -adjustment.amount
    return store.adjust_stock(part_id, delta)


@router.post("/parts/{part_id}/sales", response_model=schemas.Part, status_code=status.HTTP_201_CREATED)
def record_sale(
    part_id: str,
    sale: schemas.SaleCreate,
    store: InventoryStore = Depends(get_store),
):
    """
    Log a dispatch and take the units out of stock.

    Raises:
        HTTPException: 404 if part not found
    """
    return store.record_sale(part_id, sale.quantity, sale.timestamp)


@router.get("/parts/{part_id}/stock-history", response_model=List[schemas.HistoryEntry])
def stock_history(part_id: str, store: InventoryStore = Depends(get_store)):
    """Stock level history of a part, newest first."""
    return store.stock_history(part_id)


@router.get("/dashboard", response_model=schemas.DashboardMetrics)
def dashboard(store: InventoryStore = Depends(get_store)):
    """
    Dashboard metrics.

    Returns:
        Total unique parts, total stock value and number of low stock parts
    """
    return reports.dashboard_metrics(store.query())


@router.get("/reports/summary", response_model=schemas.PeriodSummary)
def summary_report(
    period: schemas.Period = schemas.Period.WEEKLY,
    store: InventoryStore = Depends(get_store),
):
    """
    Sales summary for the current day, the last seven days or the current year.

    Args:
        period: Daily, Weekly or Yearly (default: Weekly)
        store: Inventory store (injected)
    """
    return reports.period_summary(store.query(), period, store.now())


@router.get("/reports/eod", response_model=schemas.EodReport)
def end_of_day_report(store: InventoryStore = Depends(get_store)):
    """
    End-of-day report: parts added today and parts out of stock.
    """
    today = reports.to_local(store.now()).date()
    return reports.eod_report(store.query(), today)


@router.get("/export/csv")
def export_catalogue_csv(store: InventoryStore = Depends(get_store)):
    """
    Export all parts to CSV.

    Returns:
        CSV file with columns: id, sku, name, category, stock, price, date_added
    """
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(["id", "sku", "name", "category", "stock", "price", "date_added"])
    for part in store.query():
        writer.writerow([
            part.id,
            part.sku,
            part.name,
            part.category.value,
            part.stock,
            part.price,
            part.date_added.isoformat(),
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=catalogue.csv"},
    )


@router.post("/assist/description", response_model=schemas.AssistResponse)
async def assist_description(
    body: schemas.DescriptionRequest,
    request: Request,
    response: Response,
):
    """
    Draft a product description with the AI assistant.

    Failures are reported in the body with ``ok`` false and status 502.
    """
    result = await genai_client.generate_description(
        body.name,
        body.category,
        api_key=request.app.state.genai_api_key,
        transport=request.app.state.genai_transport,
    )
    return _assist_response(result, response)


@router.post("/assist/reorder", response_model=schemas.AssistResponse)
async def assist_reorder(
    body: schemas.ReorderRequest,
    request: Request,
    response: Response,
):
    """Ask the AI assistant for a reorder quantity."""
    result = await genai_client.suggest_reorder_quantity(
        body.name,
        body.category,
        body.stock,
        api_key=request.app.state.genai_api_key,
        transport=request.app.state.genai_transport,
    )
    return _assist_response(result, response)


def _assist_response(result: str, response: Response) -> schemas.AssistResponse:
    ok = not genai_client.is_error(result)
    if not ok:
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return schemas.AssistResponse(result=result, ok=ok)


async def _validation_error_handler(request: Request, exc: PartValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.reason, "field": exc.field})


async def _not_found_handler(request: Request, exc: PartNotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Part not found"})


async def _not_confirmed_handler(request: Request, exc: DeletionNotConfirmedError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app(
    store: Optional[InventoryStore] = None,
    clock: Callable[[], datetime] = config.utc_now,
    seed: bool = config.SEED_SAMPLE_DATA,
    genai_api_key: Optional[str] = None,
    genai_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the FastAPI application and the store it owns.

    Args:
        store: Store to serve; a new one is built when omitted
        clock: Clock for a newly built store
        seed: Load the sample catalogue into a newly built store
        genai_api_key: Gemini API key (defaults to GEMINI_API_KEY)
        genai_transport: httpx transport for Gemini calls, used in tests

    Returns:
        Configured FastAPI application
    """
    logging.basicConfig(level=config.LOG_LEVEL)

    if store is None:
        store = InventoryStore(clock=clock)
        if seed:
            store.load(sample_inventory(store.now()))
            logger.info(f"Seeded {len(store.query())} sample parts")

    app = FastAPI(title="catalogue-service")
    app.state.store = store
    app.state.session = CatalogueSession(store)
    app.state.genai_api_key = genai_api_key
    app.state.genai_transport = genai_transport

    app.add_exception_handler(PartValidationError, _validation_error_handler)
    app.add_exception_handler(PartNotFoundError, _not_found_handler)
    app.add_exception_handler(DeletionNotConfirmedError, _not_confirmed_handler)
    app.include_router(router)
    return app


app = create_app()

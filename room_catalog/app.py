"""
Room Catalog - Main FastAPI Application.

Server-rendered web UI for browsing and editing room layouts held by a
hosted CRUD API. Pages are Jinja2 templates; HTMX swaps the card grid for
live search/sort and loads the detail modal without a page reload.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

from fastapi import FastAPI, Query, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api_client import layouts_client
from .catalog import (
    SORT_CHOICES,
    apply_view,
    has_discount,
    is_available,
    layout_final_price,
    parse_sort_option,
    stock_label,
)
from .config import settings
from .exceptions import FormValidationError, LayoutNotFoundException, LayoutsApiError
from .forms import build_payload, empty_form, form_from_layout, form_from_submission
from .logging_config import get_logger, get_request_id, setup_logging
from .metrics import (
    metrics_endpoint,
    track_layout_operation,
    track_page_view,
    track_request_metrics,
)
from .metrics_middleware import PrometheusMiddleware
from .middleware import (
    PerformanceMonitoringMiddleware,
    RequestLoggingMiddleware,
    StaticFileCacheMiddleware,
)
from .models import Layout

setup_logging(log_level=settings.LOG_LEVEL, use_json=settings.LOG_JSON)
logger = get_logger(__name__)

NOTICES: Dict[str, Tuple[str, str]] = {
    "added": ("success", "Layout added"),
    "updated": ("success", "Layout updated"),
    "deleted": ("success", "Layout deleted"),
    "delete-failed": ("danger", "Error deleting layout"),
}

LOAD_ERROR_MESSAGE = "Could not load layouts. Please try again later."
SAVE_ERROR_MESSAGE = "Error saving data"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Logs the effective configuration, checks that the layouts API answers
    and closes the pooled HTTP client on shutdown.
    """
    logger.info(
        "Starting Room Catalog",
        extra={
            "extra_fields": {
                "app_name": settings.APP_NAME,
                "debug_mode": settings.DEBUG,
                "log_level": settings.LOG_LEVEL,
                "layouts_api_url": settings.LAYOUTS_API_URL,
                "request_timeout": settings.REQUEST_TIMEOUT,
            }
        },
    )

    if await layouts_client.health_check():
        logger.info("Layouts API connectivity verified")
    else:
        logger.error(
            "Layouts API is not responding",
            extra={
                "extra_fields": {
                    "layouts_api_url": settings.LAYOUTS_API_URL,
                    "impact": "Listing and editing layouts will fail",
                }
            },
        )

    yield

    logger.info("Shutting down Room Catalog")
    await layouts_client.close()


app = FastAPI(
    title=settings.APP_NAME,
    description="Catalog manager for furnished room layouts",
    version=__version__,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)

# Add middleware (order matters - first added is last executed)
app.add_middleware(StaticFileCacheMiddleware)
app.add_middleware(
    PerformanceMonitoringMiddleware,
    slow_request_threshold_ms=settings.SLOW_REQUEST_THRESHOLD_MS,
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)

if settings.ENABLE_TRACING:
    from .tracing import configure_tracing

    configure_tracing(
        app,
        service_name="room-catalog",
        service_version=__version__,
        otlp_endpoint=settings.OTLP_ENDPOINT,
    )

BASE_PATH = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_PATH / "templates"))

app.mount(
    "/static",
    StaticFiles(directory=str(BASE_PATH / "static")),
    name="static",
)


def format_number(value: Any) -> str:
    """
    Render a number without a trailing ``.0``.

    Args:
        value: Number from a layout record, or None

    Returns:
        ``"12"`` for ``12.0``, ``"12.5"`` for ``12.5``, empty string for None
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


templates.env.filters["number"] = format_number
templates.env.globals.update(
    final_price=layout_final_price,
    has_discount=has_discount,
    is_available=is_available,
    stock_label=stock_label,
    sort_choices=SORT_CHOICES,
)


def _is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


def _render_error(
    request: Request,
    status_code: int,
    title: str,
    message: str,
) -> HTMLResponse:
    """
    Render the error page, or just the alert for HTMX requests.

    htmx does not swap 4xx/5xx bodies, so the alert partial is sent with
    200 and the real status in the ``X-Error-Status`` header.
    """
    headers = None
    name = "error.html"
    if _is_htmx(request):
        name = "components/alert.html"
        headers = {"X-Error-Status": str(status_code)}
        status_code = 200
    return templates.TemplateResponse(
        request=request,
        name=name,
        context={
            "app_name": settings.APP_NAME,
            "error_title": title,
            "error_message": message,
            "request_id": get_request_id(),
        },
        status_code=status_code,
        headers=headers,
    )


async def _load_layouts() -> Tuple[List[Layout], Optional[str]]:
    """
    Fetch the collection for a list render.

    Returns:
        The layouts and ``None``, or an empty list and a user-facing message
    """
    try:
        return await layouts_client.list_layouts(), None
    except LayoutsApiError as error:
        logger.error(
            "Failed to load layouts",
            extra={"extra_fields": {"error": error.message, **error.details}},
        )
        return [], LOAD_ERROR_MESSAGE


def _grid_context(
    layouts: List[Layout],
    q: str,
    sort: str,
    load_error: Optional[str],
) -> Dict[str, Any]:
    option = parse_sort_option(sort)
    return {
        "layouts": apply_view(layouts, q, sort),
        "total": len(layouts),
        "query": q,
        "sort": option.value if option else "",
        "load_error": load_error,
    }


def _render_form(
    request: Request,
    form: Dict[str, Any],
    layout_id: Optional[str] = None,
    errors: Optional[Dict[str, str]] = None,
    save_error: Optional[str] = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request=request,
        name="layout_form.html",
        context={
            "app_name": settings.APP_NAME,
            "form": form,
            "layout_id": layout_id,
            "errors": errors or {},
            "save_error": save_error,
        },
        status_code=status_code,
    )


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Render unknown paths as the "page not found" page."""
    if exc.status_code == 404:
        return _render_error(
            request,
            404,
            "Page not found",
            "The page you are looking for does not exist.",
        )
    return await http_exception_handler(request, exc)


@app.get(
    "/",
    response_class=HTMLResponse,
    tags=["Pages"],
    summary="Layout list",
)
async def list_page(
    request: Request,
    q: str = Query(default="", description="Room name search"),
    sort: str = Query(default="", description="Sort option such as price-desc"),
    notice: Optional[str] = Query(default=None, description="Result of the last action"),
) -> HTMLResponse:
    """
    Render the catalog page with search, sort and the card grid.

    Args:
        request: FastAPI request object
        q: Case-insensitive room name filter
        sort: ``<key>-<direction>`` sort option
        notice: Key of a confirmation banner to show

    Returns:
        Rendered HTML response
    """
    track_page_view("list")
    layouts, load_error = await _load_layouts()

    context = _grid_context(layouts, q, sort, load_error)
    context.update(
        app_name=settings.APP_NAME,
        notice=NOTICES.get(notice) if notice else None,
    )

    return templates.TemplateResponse(request=request, name="index.html", context=context)


@app.get(
    "/layouts/grid",
    response_class=HTMLResponse,
    tags=["Pages"],
    summary="Layout grid partial",
    description="Card grid only, used by HTMX for live search and sorting",
)
async def layout_grid(
    request: Request,
    q: str = Query(default=""),
    sort: str = Query(default=""),
) -> HTMLResponse:
    layouts, load_error = await _load_layouts()

    logger.debug(
        "Rendering layout grid",
        extra={"extra_fields": {"query": q, "sort": sort, "total": len(layouts)}},
    )

    return templates.TemplateResponse(
        request=request,
        name="components/layout_grid.html",
        context=_grid_context(layouts, q, sort, load_error),
    )


@app.get(
    "/layouts/{layout_id}",
    response_class=HTMLResponse,
    tags=["Pages"],
    summary="Layout detail",
)
async def layout_detail(request: Request, layout_id: str) -> HTMLResponse:
    """
    Show one layout.

    HTMX requests get the modal content only; plain requests get a page.
    """
    track_page_view("detail")

    try:
        layout = await layouts_client.get_layout(layout_id)
    except LayoutNotFoundException:
        return _render_error(
            request, 404, "Layout not found", "This layout no longer exists."
        )
    except LayoutsApiError:
        return _render_error(request, 502, "Error", LOAD_ERROR_MESSAGE)

    name = "components/layout_modal.html" if _is_htmx(request) else "layout_page.html"
    return templates.TemplateResponse(
        request=request,
        name=name,
        context={"app_name": settings.APP_NAME, "room": layout},
    )


@app.get("/add-std", response_class=HTMLResponse, tags=["Pages"], summary="Create form")
async def create_form(request: Request) -> HTMLResponse:
    track_page_view("create")
    return _render_form(request, empty_form())


@app.post("/add-std", response_class=HTMLResponse, tags=["Layouts"], summary="Create layout")
async def create_layout(request: Request) -> Response:
    """
    Validate the submitted form and create the layout.

    Redirects to the list page on success; re-renders the form with the
    submitted values otherwise.
    """
    submitted = await request.form()

    try:
        payload = build_payload(submitted)
    except FormValidationError as error:
        logger.info(
            "Create form rejected",
            extra={"extra_fields": {"fields": list(error.field_errors)}},
        )
        return _render_form(
            request,
            form_from_submission(submitted),
            errors=error.field_errors,
            status_code=422,
        )

    try:
        await layouts_client.create_layout(payload)
    except LayoutsApiError as error:
        track_layout_operation("create", success=False)
        logger.error(
            "Failed to create layout",
            extra={"extra_fields": {"error": error.message}},
        )
        return _render_form(
            request,
            form_from_submission(submitted),
            save_error=SAVE_ERROR_MESSAGE,
            status_code=502,
        )

    track_layout_operation("create", success=True)
    return RedirectResponse(url="/?notice=added", status_code=303)


@app.get(
    "/update-std/{layout_id}",
    response_class=HTMLResponse,
    tags=["Pages"],
    summary="Edit form",
)
async def edit_form(request: Request, layout_id: str) -> HTMLResponse:
    """Render the edit form prefilled from the stored record."""
    track_page_view("edit")

    try:
        layout = await layouts_client.get_layout(layout_id)
    except LayoutNotFoundException:
        return _render_error(
            request, 404, "Layout not found", "This layout no longer exists."
        )
    except LayoutsApiError:
        return _render_error(request, 502, "Error", LOAD_ERROR_MESSAGE)

    return _render_form(request, form_from_layout(layout), layout_id=layout_id)


@app.post(
    "/update-std/{layout_id}",
    response_class=HTMLResponse,
    tags=["Layouts"],
    summary="Update layout",
)
async def update_layout(request: Request, layout_id: str) -> Response:
    """Validate the submitted form and replace the stored record."""
    submitted = await request.form()

    try:
        payload = build_payload(submitted)
    except FormValidationError as error:
        return _render_form(
            request,
            form_from_submission(submitted),
            layout_id=layout_id,
            errors=error.field_errors,
            status_code=422,
        )

    try:
        await layouts_client.update_layout(layout_id, payload)
    except LayoutNotFoundException:
        track_layout_operation("update", success=False)
        return _render_error(
            request, 404, "Layout not found", "This layout no longer exists."
        )
    except LayoutsApiError as error:
        track_layout_operation("update", success=False)
        logger.error(
            "Failed to update layout",
            extra={"extra_fields": {"layout_id": layout_id, "error": error.message}},
        )
        return _render_form(
            request,
            form_from_submission(submitted),
            layout_id=layout_id,
            save_error=SAVE_ERROR_MESSAGE,
            status_code=502,
        )

    track_layout_operation("update", success=True)
    return RedirectResponse(url="/?notice=updated", status_code=303)


@app.post("/layouts/{layout_id}/delete", tags=["Layouts"], summary="Delete layout")
async def delete_layout(layout_id: str) -> RedirectResponse:
    """Delete a layout and return to the list with a confirmation banner."""
    try:
        await layouts_client.delete_layout(layout_id)
    except LayoutsApiError as error:
        track_layout_operation("delete", success=False)
        logger.error(
            "Failed to delete layout",
            extra={"extra_fields": {"layout_id": layout_id, "error": error.message}},
        )
        return RedirectResponse(url="/?notice=delete-failed", status_code=303)

    track_layout_operation("delete", success=True)
    return RedirectResponse(url="/?notice=deleted", status_code=303)


@app.get(
    "/health",
    tags=["Health"],
    summary="Health check",
    description="Check service health and the layouts API",
)
async def health_check() -> Dict[str, Any]:
    """
    Report this service's status and the layouts API's reachability.

    Returns:
        ``{"status": "healthy" | "degraded", "service": ..., "dependencies": {...}}``
    """
    api_healthy = await layouts_client.health_check()

    return {
        "status": "healthy" if api_healthy else "degraded",
        "service": "room-catalog",
        "dependencies": {
            "layouts_api": "healthy" if api_healthy else "unhealthy",
        },
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return await metrics_endpoint()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()

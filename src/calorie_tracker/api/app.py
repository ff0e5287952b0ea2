"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Form, Request, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.services.entries import InvalidFoodNameError

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


def create_app(container: AppContainer) -> FastAPI:  # noqa: C901
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["local_time"] = _local_time_filter(
        container.settings.timezone
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Calorie Tracker app started")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return PlainTextResponse("Page not found", status_code=exc.status_code)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> Response:
        """Show today's entries with the calorie total."""
        state_container: AppContainer = request.app.state.container
        try:
            daily = state_container.food_log_service.get_today()
        except Exception:
            logger.exception("Failed to load today's entries")
            return _server_error("Error loading home page")
        return templates.TemplateResponse(
            request,
            "index.html",
            {"foods": daily.entries, "total_calories": daily.total_calories},
        )

    @app.get("/about", response_class=HTMLResponse)
    async def about(request: Request) -> Response:
        """Static about page."""
        return templates.TemplateResponse(request, "about.html", {})

    @app.get("/add", response_class=HTMLResponse)
    async def add_form(request: Request) -> Response:
        """Render the add-food form."""
        return templates.TemplateResponse(request, "add.html", {"error": None})

    @app.post("/add")
    async def add_food(
        request: Request, food_name: str = Form(default="")
    ) -> Response:
        """Resolve calories for the submitted food and store it."""
        state_container: AppContainer = request.app.state.container
        try:
            entry = await state_container.food_log_service.add_entry(food_name)
        except InvalidFoodNameError as exc:
            return templates.TemplateResponse(
                request, "add.html", {"error": str(exc), "food_name": food_name}
            )
        except Exception:
            logger.exception("Failed to add food", extra={"food_name": food_name})
            return _server_error("Error adding food")
        logger.info("Logged %s (%s kcal)", entry.food_name, entry.calories)
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/search", response_class=HTMLResponse)
    async def search(request: Request, q: str = "") -> Response:
        """Search previously logged foods by name."""
        state_container: AppContainer = request.app.state.container
        try:
            results = state_container.food_log_service.search(q)
        except Exception:
            logger.exception("Failed to search foods", extra={"query": q})
            return _server_error("Error performing search")
        return templates.TemplateResponse(
            request, "search.html", {"query": q, "results": results}
        )

    @app.get("/day", response_class=HTMLResponse)
    async def day_view(request: Request, date: str | None = None) -> Response:
        """Show entries and total for a given day (defaults to today)."""
        state_container: AppContainer = request.app.state.container
        service = state_container.food_log_service
        if date:
            selected = _parse_date(date)
            if selected is None:
                return PlainTextResponse(
                    "Invalid date", status_code=status.HTTP_400_BAD_REQUEST
                )
        else:
            selected = service.today()
        try:
            daily = service.get_day(selected)
        except Exception:
            logger.exception("Failed to load day view", extra={"day": str(selected)})
            return _server_error("Error loading day view")
        return templates.TemplateResponse(
            request,
            "day.html",
            {
                "date": daily.day.isoformat(),
                "foods": daily.entries,
                "total_calories": daily.total_calories,
            },
        )

    return app


def _server_error(message: str) -> PlainTextResponse:
    return PlainTextResponse(
        message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _parse_date(raw: str) -> date | None:
    """Parse a YYYY-MM-DD string, returning None when malformed."""
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def _local_time_filter(timezone_name: str) -> Callable[..., str]:
    tz = ZoneInfo(timezone_name)

    def local_time(value: datetime, fmt: str = "%Y-%m-%d %H:%M") -> str:
        return value.astimezone(tz).strftime(fmt)

    return local_time

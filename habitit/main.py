"""Main FastAPI application."""

import logging
from dataclasses import asdict
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .config import settings
from .core import statistics
from .core.clock import Clock
from .core.dates import date_range
from .core.models import Habit, HabitValidationError
from .core.streaks import best_streak, current_streak
from .store.repository import JsonFileRepository
from .store.schemas import (
    CompletionSummary,
    ConsistencyItem,
    CorrelationItem,
    HabitCreate,
    HabitTrend,
    HabitUpdate,
    ImportResponse,
)
from .store.service import HabitService
from .store.snapshot import SnapshotError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Habitit",
    description="Habit progress and statistics engine",
    version="1.0.0",
)

# Initialize components
service = HabitService(
    repository=JsonFileRepository(settings.data_path),
    clock=Clock(settings.timezone),
)


@app.exception_handler(HabitValidationError)
async def habit_validation_handler(request: Request, exc: HabitValidationError):
    logger.info(f"Rejected habit: {exc}")
    return JSONResponse(
        status_code=422,
        content={"status": "error", "field": exc.field, "message": exc.message},
    )


@app.exception_handler(SnapshotError)
async def snapshot_error_handler(request: Request, exc: SnapshotError):
    logger.warning(f"Rejected import: {exc}")
    return JSONResponse(status_code=400, content={"status": "error", "message": str(exc)})


def dump_habit(habit: Habit) -> dict:
    return habit.model_dump(mode="json", by_alias=True)


def require_habit(habit: Optional[Habit], habit_id: str) -> Habit:
    if habit is None:
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    return habit


def resolve_range(start: Optional[date], end: Optional[date]) -> tuple[date, date]:
    """Default to the last 30 days ending today."""
    end = end or service.clock.today()
    start = start or end - timedelta(days=29)
    return start, end


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Habitit",
        "version": "1.0.0",
        "endpoints": {
            "habits": "/api/habits",
            "stats": "/api/stats/summary",
            "export": "/api/export",
            "import": "/api/import",
            "status": "/status",
        },
    }


@app.get("/status")
async def status():
    """Server status endpoint."""
    return {
        "status": "running",
        "version": "1.0.0",
        "timestamp": datetime.now().astimezone().isoformat(),
        "today": service.clock.today().isoformat(),
        "habits": len(service.habits),
    }


# Habits


@app.get("/api/habits")
async def list_habits():
    return [dump_habit(habit) for habit in service.habits]


@app.post("/api/habits", status_code=201)
async def create_habit(body: HabitCreate):
    habit = service.add_habit(**body.model_dump())
    return dump_habit(habit)


@app.get("/api/habits/{habit_id}")
async def get_habit(habit_id: str):
    return dump_habit(require_habit(service.get(habit_id), habit_id))


@app.patch("/api/habits/{habit_id}")
async def update_habit(habit_id: str, body: HabitUpdate):
    changes = body.model_dump(exclude_unset=True)
    return dump_habit(require_habit(service.update_habit(habit_id, **changes), habit_id))


@app.delete("/api/habits/{habit_id}")
async def delete_habit(habit_id: str):
    if not service.delete_habit(habit_id):
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    return {"status": "success", "message": "Habit deleted"}


# Progress


@app.post("/api/habits/{habit_id}/increment")
async def increment(habit_id: str):
    return dump_habit(require_habit(service.increment(habit_id), habit_id))


@app.post("/api/habits/{habit_id}/decrement")
async def decrement(habit_id: str):
    return dump_habit(require_habit(service.decrement(habit_id), habit_id))


@app.post("/api/habits/{habit_id}/complete")
async def complete(habit_id: str):
    return dump_habit(require_habit(service.complete(habit_id), habit_id))


@app.post("/api/habits/{habit_id}/undo")
async def undo_complete(habit_id: str):
    return dump_habit(require_habit(service.undo_complete(habit_id), habit_id))


# Per-habit analytics


@app.get("/api/habits/{habit_id}/calendar")
async def habit_calendar(habit_id: str, days: int = settings.calendar_days):
    require_habit(service.get(habit_id), habit_id)
    return [asdict(day) for day in service.calendar_data(habit_id, days)]


@app.get("/api/habits/{habit_id}/trend", response_model=HabitTrend)
async def habit_trend(
    habit_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    window: int = settings.rolling_window_days,
):
    """Rolling completion average plus streaks for one habit."""
    habit = require_habit(service.get(habit_id), habit_id)
    start, end = resolve_range(start, end)
    dates = date_range(start, end)

    return HabitTrend(
        habit_id=habit.id,
        dates=dates,
        rolling_average=statistics.rolling_average(habit, dates, window),
        current_streak=current_streak(habit.history, service.clock.today()),
        best_streak=best_streak(habit.history),
    )


# Collection statistics


@app.get("/api/stats/summary", response_model=CompletionSummary)
async def stats_summary():
    stats = service.completion_stats()
    return CompletionSummary(
        completed=stats.completed,
        total=stats.total,
        percentage=stats.percentage,
        longest_streak=service.longest_streak(),
    )


@app.get("/api/stats/categories")
async def stats_categories():
    return {
        category.value: count
        for category, count in statistics.category_stats(service.habits).items()
    }


@app.get("/api/stats/weekly")
async def stats_weekly():
    return [asdict(bucket) for bucket in statistics.weekly_completion(service.habits)]


@app.get("/api/stats/time-of-day")
async def stats_time_of_day():
    distribution = service.time_of_day_distribution()
    return {
        "counts": asdict(distribution),
        "percentages": distribution.percentages(),
        "total": distribution.total,
    }


@app.get("/api/stats/consistency", response_model=list[ConsistencyItem])
async def stats_consistency(start: Optional[date] = None, end: Optional[date] = None):
    start, end = resolve_range(start, end)
    return [
        ConsistencyItem(
            habit_id=item.habit.id,
            name=item.habit.name,
            score=item.score,
            completed_days=item.completed_days,
            range_days=item.range_days,
        )
        for item in statistics.consistency_scores(service.habits, start, end)
    ]


@app.get("/api/stats/correlations", response_model=list[CorrelationItem])
async def stats_correlations(start: Optional[date] = None, end: Optional[date] = None):
    start, end = resolve_range(start, end)
    return [
        CorrelationItem(
            habit1_id=item.habit1.id,
            habit2_id=item.habit2.id,
            habit1_name=item.habit1.name,
            habit2_name=item.habit2.name,
            score=item.score,
            level=item.level,
        )
        for item in statistics.habit_correlations(service.habits, start, end)
    ]


# Backup


@app.get("/api/export")
async def export_data():
    return service.export_snapshot()


@app.post("/api/import", response_model=ImportResponse)
async def import_data(request: Request):
    """
    Replace all habits with an exported snapshot.

    The raw body is parsed so malformed JSON is reported as a rejected
    import rather than a request validation error.
    """
    body = await request.body()
    snapshot = service.import_snapshot(body.decode("utf-8", errors="replace"))
    return ImportResponse(imported=len(snapshot.habits), preferences=snapshot.preferences)


@app.post("/api/mock")
async def mock_data(seed: Optional[int] = None):
    """Replace all habits with generated demo data."""
    habits = service.generate_mock_data(seed=seed, days=settings.mock_history_days)
    return {"status": "success", "habits": len(habits)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )

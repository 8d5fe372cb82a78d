from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from typing import Optional

from advisor import Advisor, build_advisor
from coaching import coach
from config import Settings
from estimation import estimate_duration
from models import (
    Task,
    TaskCreate,
    TaskUpdate,
    ScheduleResponse,
    ProductivityScore,
    BurnoutScore,
    EstimateRequest,
    Estimate,
    CoachAdvice,
    STATUSES,
    STATUS_DONE,
)
from scheduling import build_schedule
from scoring import score_productivity, score_burnout
import database

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Completed-task windows used by the analytics endpoints
RECENT_COMPLETED_LIMIT = 30
SCHEDULE_HISTORY_LIMIT = 20

settings = Settings.from_env()
advisor = build_advisor(settings)

@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    database.init_db()
    yield
    # Shutdown (nothing to do)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_advisor() -> Advisor:
    return advisor


def current_user(x_user_id: str = Header(...)) -> str:
    """Caller identity; authentication happens upstream."""
    if not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing user id")
    return x_user_id.strip()


@app.get("/tasks")
def get_tasks(q: Optional[str] = None, user_id: str = Depends(current_user)) -> list[Task]:
    if q:
        return database.find_tasks_by_title_db(user_id, q)
    return database.get_all_tasks(user_id)


@app.post("/tasks", status_code=201)
def create_task(task_data: TaskCreate, user_id: str = Depends(current_user)) -> Task:
    if not task_data.title.strip():
        raise HTTPException(status_code=400, detail="Task title is required")
    return database.create_task_db(
        task_data.title,
        user_id,
        description=task_data.description,
        priority=task_data.priority,
        parent_id=task_data.parent_id,
    )


def get_owned_task(task_id: str, user_id: str) -> Task:
    """The caller's task; someone else's task is reported as missing."""
    task = database.get_task_db(task_id)
    if task is None or task.assigned_to != user_id:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def complete_parent_if_done(parent_id: str, user_id: str) -> None:
    """Mark the parent Done once every remaining subtask is Done."""
    parent = database.get_task_db(parent_id)
    if parent is None or parent.assigned_to != user_id or parent.status == STATUS_DONE:
        return
    if all(child.status == STATUS_DONE for child in database.get_children_db(parent_id)):
        logger.info("All subtasks of %s are done; completing it", parent_id)
        database.update_task_db(parent_id, status=STATUS_DONE)


@app.patch("/tasks/{task_id}")
def update_task(task_id: str, task_data: TaskUpdate, user_id: str = Depends(current_user)) -> Task:
    task = get_owned_task(task_id, user_id)
    if task_data.status is not None and task_data.status not in STATUSES:
        raise HTTPException(status_code=400, detail=f"Unknown status: {task_data.status}")
    if task_data.total_time_spent is not None and task_data.total_time_spent < 0:
        raise HTTPException(status_code=400, detail="total_time_spent must not be negative")

    result = database.update_task_db(task_id, **task_data.model_dump(exclude_none=True))
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    if task_data.status == STATUS_DONE and task.parent_id:
        complete_parent_if_done(task.parent_id, user_id)
    return result


@app.delete("/tasks/{task_id}")
def delete_task(task_id: str, user_id: str = Depends(current_user)) -> dict:
    get_owned_task(task_id, user_id)
    if not database.delete_task_db(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "deleted"}


@app.post("/agent/schedule")
def schedule(
    user_id: str = Depends(current_user),
    advisor: Advisor = Depends(get_advisor),
) -> ScheduleResponse:
    """Today's time-blocked plan for the caller's pending tasks."""
    pending = database.get_pending_tasks(user_id)
    history = database.get_completed_tasks(user_id, limit=SCHEDULE_HISTORY_LIMIT, roots_only=True)
    return ScheduleResponse(schedule=build_schedule(pending, history, advisor))


@app.get("/agent/productivity-score")
def productivity_score(
    user_id: str = Depends(current_user),
    advisor: Advisor = Depends(get_advisor),
) -> ProductivityScore:
    completed = database.get_completed_tasks(user_id, limit=RECENT_COMPLETED_LIMIT, roots_only=True)
    total_roots = len(database.get_root_tasks(user_id))
    return score_productivity(completed, total_roots, advisor)


@app.get("/agent/burnout-score")
def burnout_score(
    user_id: str = Depends(current_user),
    advisor: Advisor = Depends(get_advisor),
) -> BurnoutScore:
    return score_burnout(database.get_root_tasks(user_id), advisor)


@app.post("/agent/estimate")
def estimate(
    request: EstimateRequest,
    user_id: str = Depends(current_user),
    advisor: Advisor = Depends(get_advisor),
) -> Estimate:
    if not request.title or not request.title.strip():
        raise HTTPException(status_code=400, detail="Task title is required")
    history = database.get_completed_tasks(user_id)
    return estimate_duration(request.title, request.description, history, advisor)


@app.get("/agent/coach")
def coaching_advice(
    user_id: str = Depends(current_user),
    advisor: Advisor = Depends(get_advisor),
) -> CoachAdvice:
    completed = database.get_completed_tasks(user_id, limit=RECENT_COMPLETED_LIMIT, roots_only=True)
    return CoachAdvice(advice=coach(completed, advisor))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

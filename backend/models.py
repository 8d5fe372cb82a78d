from pydantic import BaseModel
from typing import Optional

STATUS_TODO = "Todo"
STATUS_IN_PROGRESS = "In Progress"
STATUS_DONE = "Done"

PRIORITY_LOW = "Low"
PRIORITY_MEDIUM = "Medium"
PRIORITY_HIGH = "High"

STATUSES = (STATUS_TODO, STATUS_IN_PROGRESS, STATUS_DONE)


class Task(BaseModel):
    id: str
    title: str
    description: str = ""
    status: str = STATUS_TODO  # Todo, In Progress, Done
    priority: str = PRIORITY_MEDIUM  # Low, Medium, High; anything else ranks lowest
    parent_id: Optional[str] = None
    assigned_to: str
    total_time_spent: int = 0  # Minutes, accumulated by the time tracker
    created_at: str  # ISO format datetime string
    updated_at: Optional[str] = None  # ISO format datetime string
    is_deleted: bool = False

class TaskCreate(BaseModel):
    title: str
    description: str = ""
    priority: str = PRIORITY_MEDIUM
    parent_id: Optional[str] = None

class TaskUpdate(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None
    description: Optional[str] = None
    total_time_spent: Optional[int] = None  # Minutes; replaces the stored total

class ScheduleItem(BaseModel):
    title: str
    priority: str
    description: str = ""
    start: str  # H:MM, hours may run past 23
    end: str
    duration_minutes: int
    reasoning: str

class ScheduleResponse(BaseModel):
    schedule: list[dict]

class ProductivityMetrics(BaseModel):
    tasks_completed: int = 0
    completion_rate: int = 0
    average_time_per_task: int = 0
    high_priority_completed: int = 0
    trend: str = "No data yet"

class ProductivityScore(BaseModel):
    score: int
    metrics: ProductivityMetrics
    suggestions: list[str] = []

class BurnoutMetrics(BaseModel):
    unfinished_tasks: int
    high_priority_unfinished: int
    in_progress_count: int
    task_load_ratio: float
    average_time_per_task: int
    recommendation: str

class BurnoutScore(BaseModel):
    score: int
    level: str
    metrics: BurnoutMetrics
    reasons: list[str]
    recovery_tips: list[str]

class EstimateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

class Estimate(BaseModel):
    minutes: int
    source: str  # history, ai or fallback
    reasoning: str

class CoachAdvice(BaseModel):
    advice: str

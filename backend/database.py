import os
import sqlite3
import subprocess
import uuid
from datetime import datetime
from typing import Optional
from contextlib import contextmanager

from config import BACKEND_DIR, Settings
from models import Task, STATUS_TODO, STATUS_DONE, PRIORITY_MEDIUM

# Absolute path; alembic/env.py resolves the same file from Settings
DATABASE_PATH = Settings.from_env().database_file

@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Initialize database by running Alembic migrations against DATABASE_PATH."""
    subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=BACKEND_DIR,
        env={**os.environ, "TASKPULSE_DATABASE_PATH": DATABASE_PATH},
        check=True
    )

def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        status=row["status"],
        # Rows written before priorities existed have NULL here
        priority=row["priority"] or PRIORITY_MEDIUM,
        parent_id=row["parent_id"],
        assigned_to=row["assigned_to"],
        total_time_spent=row["total_time_spent"] or 0,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        is_deleted=bool(row["is_deleted"]),
    )


def create_task_db(
    title: str,
    assigned_to: str,
    description: str = "",
    status: str = STATUS_TODO,
    priority: str = PRIORITY_MEDIUM,
    parent_id: Optional[str] = None,
    total_time_spent: int = 0,
    task_id: Optional[str] = None,
    updated_at: Optional[str] = None,
) -> Task:
    """Create a task. updated_at defaults to the creation time."""
    task_id = task_id or str(uuid.uuid4())
    created_at = datetime.now().isoformat()
    updated_at = updated_at or created_at

    with get_db() as conn:
        conn.execute(
            """INSERT INTO tasks
               (id, title, description, status, priority, parent_id, assigned_to, total_time_spent, created_at, updated_at, is_deleted)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0)""",
            (task_id, title, description, status, priority, parent_id, assigned_to, total_time_spent, created_at, updated_at)
        )
        conn.commit()

    return Task(
        id=task_id,
        title=title,
        description=description,
        status=status,
        priority=priority,
        parent_id=parent_id,
        assigned_to=assigned_to,
        total_time_spent=total_time_spent,
        created_at=created_at,
        updated_at=updated_at,
    )

def get_task_db(task_id: str) -> Optional[Task]:
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM tasks WHERE id = ? AND is_deleted = 0", (task_id,)
        ).fetchone()
        return _row_to_task(row) if row else None

def update_task_db(task_id: str, **updates) -> Optional[Task]:
    """
    Update a task with any fields provided and stamp updated_at.

    Args:
        task_id: Task ID to update
        **updates: Field names and values to update (title, description, status, priority, total_time_spent)
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ? AND is_deleted = 0", (task_id,)).fetchone()
        if not row:
            return None

        keys = row.keys()
        changes = {field: value for field, value in updates.items() if field in keys and field != "id"}
        if changes:
            changes.setdefault("updated_at", datetime.now().isoformat())
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [task_id]
            conn.execute(f"UPDATE tasks SET {set_clause} WHERE id = ?", values)
            conn.commit()

        updated_row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(updated_row)

def delete_task_db(task_id: str) -> bool:
    """Soft delete: the row stays but no query below returns it."""
    with get_db() as conn:
        cursor = conn.execute(
            "UPDATE tasks SET is_deleted = 1, updated_at = ? WHERE id = ? AND is_deleted = 0",
            (datetime.now().isoformat(), task_id)
        )
        conn.commit()
        return cursor.rowcount > 0

def get_all_tasks(assigned_to: str) -> list[Task]:
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM tasks WHERE assigned_to = ? AND is_deleted = 0 ORDER BY created_at DESC",
            (assigned_to,)
        ).fetchall()
        return [_row_to_task(row) for row in rows]

def get_tasks_by_status(assigned_to: str, status: str) -> list[Task]:
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM tasks WHERE assigned_to = ? AND status = ? AND is_deleted = 0 ORDER BY created_at",
            (assigned_to, status)
        ).fetchall()
        return [_row_to_task(row) for row in rows]

def get_pending_tasks(assigned_to: str) -> list[Task]:
    """Tasks still to do (status Todo), subtasks included."""
    return get_tasks_by_status(assigned_to, STATUS_TODO)

def get_completed_tasks(assigned_to: str, limit: Optional[int] = None, roots_only: bool = False) -> list[Task]:
    """Completed tasks, most recently updated first."""
    query = "SELECT * FROM tasks WHERE assigned_to = ? AND status = ? AND is_deleted = 0"
    params: list = [assigned_to, STATUS_DONE]
    if roots_only:
        query += " AND parent_id IS NULL"
    query += " ORDER BY updated_at DESC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)
    with get_db() as conn:
        rows = conn.execute(query, params).fetchall()
        return [_row_to_task(row) for row in rows]

def get_root_tasks(assigned_to: str) -> list[Task]:
    """Top-level tasks (no parent) in any status."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM tasks WHERE assigned_to = ? AND parent_id IS NULL AND is_deleted = 0 ORDER BY created_at",
            (assigned_to,)
        ).fetchall()
        return [_row_to_task(row) for row in rows]

def get_children_db(parent_id: str) -> list[Task]:
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM tasks WHERE parent_id = ? AND is_deleted = 0 ORDER BY created_at",
            (parent_id,)
        ).fetchall()
        return [_row_to_task(row) for row in rows]

def find_tasks_by_title_db(assigned_to: str, fragment: str) -> list[Task]:
    """Tasks whose title contains fragment (case-insensitive, matched literally)."""
    fragment_lower = fragment.lower()
    return [task for task in get_all_tasks(assigned_to) if fragment_lower in task.title.lower()]

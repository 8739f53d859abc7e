# routers/tasks.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.capabilities import Capability
from core.permission_helpers import requires_capability
from core.store import AccessStore
from dependencies.auth import get_store
from models import Principal, Task, TaskStatus

router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
)


@router.get("", response_model=List[Task])
def list_tasks(
    team_id: Optional[str] = Query(None, description="Only tasks allocated to this team"),
    status: Optional[TaskStatus] = Query(None),
    principal: Principal = Depends(requires_capability(Capability.task_management)),
    store: AccessStore = Depends(get_store),
):
    tasks = store.list_tasks(principal, team_id)
    if status:
        tasks = [t for t in tasks if t.status == status]
    return tasks

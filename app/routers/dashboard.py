from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_role
from app.models.user import Role
from app.schemas.task import AdminTaskList, TaskList
from app.stores import TaskStore
from app.utils.auth import Identity

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/user", response_model=TaskList)
def user_dashboard(identity: Identity = Depends(require_role(Role.user)), db: Session = Depends(get_db)):
    return {"tasks": TaskStore(db).for_owner(identity.id)}


@router.get("/admin", response_model=AdminTaskList)
def admin_dashboard(identity: Identity = Depends(require_role(Role.admin)), db: Session = Depends(get_db)):
    """Every task in the system, each with its owner's email."""
    return {"tasks": TaskStore(db).all_with_owner()}

from typing import Annotated
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.core import require_permission
from school_backend.permissions.principal import Principal
from school_backend.services.dashboard import get_dashboard_stats

dashboard_router = APIRouter()

class DashboardStats(BaseModel):
    total_students: int
    total_staff: int
    total_courses: int
    total_classes: int
    lessons_today: int

@dashboard_router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats_route(permissions: Annotated[Principal, Depends(get_current_permissions)], db: Session = Depends(get_db)):

    require_permission(permissions, "view_dashboard_stats")

    return DashboardStats(**get_dashboard_stats(db))

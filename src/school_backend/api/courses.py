from typing import Annotated
from fastapi import Depends
from sqlalchemy.orm import Session

from school_backend.api.api_builder import CrudRouter
from school_backend.database import get_db
from school_backend.interface.courses import CourseInterface, CourseTree
from school_backend.model.course import Course
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.core import check_permissions
from school_backend.permissions.principal import Principal
from school_backend.services.curriculum import get_course_tree

course_router = CrudRouter(CourseInterface)

@course_router.router.get("/{course_id}/tree", response_model=CourseTree)
def get_course_tree_route(permissions: Annotated[Principal, Depends(get_current_permissions)], course_id: str, db: Session = Depends(get_db)):

    check_permissions(permissions, Course, "get", db)

    return CourseTree.model_validate(get_course_tree(course_id, db), from_attributes=True)

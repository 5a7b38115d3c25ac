import logging
from contextlib import asynccontextmanager
from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from school_backend.api.api_builder import CrudRouter, LookUpRouter
from school_backend.api.auth import auth_router
from school_backend.api.classes import class_router
from school_backend.api.courses import course_router
from school_backend.api.dashboard import dashboard_router
from school_backend.api.lessons import lesson_router
from school_backend.api.permissions import permissions_router
from school_backend.api.schedule import schedule_router
from school_backend.api.support import support_router
from school_backend.api.users import user_router
from school_backend.database import Database
from school_backend.interface.courses import (
    BookInterface, CourseActivityInterface, CourseUnitInterface, CourseVideoInterface
)
from school_backend.interface.permissions import PermissionCategoryInterface, PermissionInterface, RoleInterface
from school_backend.interface.staff import StaffInterface
from school_backend.interface.students import StudentCourseEnrollmentInterface, StudentInterface
from school_backend.interface.units import SchoolUnitInterface
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.core import initialize_permission_handlers
from school_backend.redis_cache import close_redis_client, get_redis_client
from school_backend.settings import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):

    logging.basicConfig(level=settings.LOG_LEVEL)

    # Refuse to serve without a token signing key
    settings.jwt_secret

    initialize_permission_handlers()

    # Tests install their own handle before startup
    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database(settings.database_url)
        logger.info("Database engine created")

    yield

    if owns_database:
        app.state.database.dispose()
        app.state.database = None

    await close_redis_client()

app = FastAPI(title="School Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

api_router = APIRouter(prefix="/api")

# People and places
user_router.register_routes(api_router)
CrudRouter(SchoolUnitInterface).register_routes(api_router)
CrudRouter(StaffInterface).register_routes(api_router)
CrudRouter(StudentInterface).register_routes(api_router)
CrudRouter(StudentCourseEnrollmentInterface).register_routes(api_router)

# Curriculum
course_router.register_routes(api_router)
CrudRouter(BookInterface).register_routes(api_router)
CrudRouter(CourseUnitInterface).register_routes(api_router)
CrudRouter(CourseVideoInterface).register_routes(api_router)
CrudRouter(CourseActivityInterface).register_routes(api_router)

# Classes, lessons, enrollments and attendance
class_router.register_routes(api_router)
lesson_router.register_routes(api_router)

api_router.include_router(
    schedule_router,
    prefix="/schedule",
    tags=["schedule"],
    dependencies=[Depends(get_current_permissions), Depends(get_redis_client)]
)

# Support
support_router.register_routes(api_router)

api_router.include_router(
    dashboard_router,
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_current_permissions)]
)

# Permission catalog and assignments
LookUpRouter(PermissionInterface).register_routes(api_router)
LookUpRouter(PermissionCategoryInterface).register_routes(api_router)
LookUpRouter(RoleInterface).register_routes(api_router)

api_router.include_router(
    permissions_router,
    prefix="/permissions",
    tags=["permissions"],
    dependencies=[Depends(get_current_permissions)]
)

api_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["authentication"]
)

app.include_router(api_router)

@app.head("/", status_code=204)
def get_status_head():
    return

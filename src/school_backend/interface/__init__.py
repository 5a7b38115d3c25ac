from .base import EntityInterface
from .users import UserInterface
from .units import SchoolUnitInterface
from .staff import StaffInterface
from .students import StudentInterface, StudentCourseEnrollmentInterface
from .courses import (
    CourseInterface,
    BookInterface,
    CourseUnitInterface,
    CourseVideoInterface,
    CourseActivityInterface
)
from .classes import ClassSlotInterface
from .lessons import LessonInterface
from .support import SupportTicketInterface
from .permissions import PermissionInterface, PermissionCategoryInterface, RoleInterface

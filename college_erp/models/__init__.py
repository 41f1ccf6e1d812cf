# Package marker
from college_erp.models.user import (  # noqa
    UserRole,
    Department,
    User,
    StudentDetail,
    FacultyDetail,
    AdminDetail,
    SuperuserDetail,
)
from college_erp.models.course import Course  # noqa
from college_erp.models.semester import Semester  # noqa
from college_erp.models.section import Section, StudentSectionEnrollment  # noqa
from college_erp.models.schedule import ScheduleItem  # noqa
from college_erp.models.message import Message  # noqa

"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Course and CourseOffering are the catalog roots; Enrollment links users to offerings
    - Assignments and announcements hang off an offering and cascade with it

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from unierp.models.user import User  # noqa: F401
from unierp.models.course import Course  # noqa: F401
from unierp.models.prerequisite import Prerequisite  # noqa: F401
from unierp.models.course_offering import CourseOffering  # noqa: F401
from unierp.models.course_schedule import CourseSchedule  # noqa: F401
from unierp.models.enrollment import Enrollment  # noqa: F401
from unierp.models.assignment import Assignment  # noqa: F401
from unierp.models.assignment_submission import AssignmentSubmission  # noqa: F401
from unierp.models.announcement import Announcement  # noqa: F401
from unierp.models.global_announcement import GlobalAnnouncement  # noqa: F401
from unierp.models.system_setting import SystemSetting  # noqa: F401

from coachcal.schemas.blocked_time import (
    BlockedTimeCreate,
    BlockedTimeRead,
    BlockedTimeUpdate,
)
from coachcal.schemas.coach import (
    ClientCreate,
    ClientRead,
    CoachCreate,
    CoachRead,
    OrganizationCreate,
    OrganizationRead,
)
from coachcal.schemas.lesson import (
    LessonCreate,
    LessonFailure,
    LessonRead,
    RecurringLessonCreate,
    RecurringLessonResult,
)
from coachcal.schemas.recurrence import (
    RecurrencePreview,
    RecurrencePreviewRequest,
    RecurrenceRequest,
)
from coachcal.schemas.slot import DaySlotsRead, SlotRead
from coachcal.schemas.system import StatusResponse
from coachcal.schemas.working_hours import (
    CustomDayOverride,
    WorkingHours,
    WorkingHoursRead,
    WorkingHoursUpdate,
)

__all__ = [
    "BlockedTimeCreate",
    "BlockedTimeRead",
    "BlockedTimeUpdate",
    "ClientCreate",
    "ClientRead",
    "CoachCreate",
    "CoachRead",
    "CustomDayOverride",
    "DaySlotsRead",
    "LessonCreate",
    "LessonFailure",
    "LessonRead",
    "OrganizationCreate",
    "OrganizationRead",
    "RecurrencePreview",
    "RecurrencePreviewRequest",
    "RecurrenceRequest",
    "RecurringLessonCreate",
    "RecurringLessonResult",
    "SlotRead",
    "StatusResponse",
    "WorkingHours",
    "WorkingHoursRead",
    "WorkingHoursUpdate",
]

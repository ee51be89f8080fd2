from coachcal.models.blocked_time import BlockedTime
from coachcal.models.coach import Client, Coach
from coachcal.models.lesson import Lesson
from coachcal.models.organization import Organization

__all__ = [
    "BlockedTime",
    "Client",
    "Coach",
    "Lesson",
    "Organization",
]

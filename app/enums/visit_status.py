from enum import Enum


class VisitStatus(str, Enum):
    """Enum for the lifecycle states of a visit request"""

    PENDING = "pending"
    APPROVED = "approved"
    RESCHEDULED = "rescheduled"
    VISITED = "visited"
    REJECTED = "rejected"
    COMPLETED = "completed"

    def __str__(self):
        return self.value

from enum import Enum

class ComplaintStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"

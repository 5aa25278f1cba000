from enum import Enum


class ApartmentStatus(str, Enum):
    """Enum for the occupancy status of an apartment"""

    AVAILABLE = "available"
    RENTED = "rented"

    def __str__(self):
        return self.value

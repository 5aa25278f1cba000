from enum import Enum


class VenueType(str, Enum):
    """Enum for the shared venues tenants can book"""

    GARDEN_HALL = "garden_hall"
    COMMUNITY_HALL = "community_hall"
    ROOFTOP_TERRACE = "rooftop_terrace"
    GYM = "gym"
    POOL = "pool"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    def __str__(self):
        return self.value

from enum import Enum


class ApartmentType(str, Enum):
    """Enum for different types of apartments"""

    STUDIO = "studio"
    ONE_BEDROOM = "one_bedroom"
    TWO_BEDROOM = "two_bedroom"
    THREE_BEDROOM = "three_bedroom"
    PENTHOUSE = "penthouse"

    def __str__(self):
        return self.value

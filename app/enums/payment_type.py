from enum import Enum


class PaymentType(str, Enum):
    RENT = "rent"
    MAINTENANCE = "maintenance"
    ELECTRICITY = "electricity"
    GAS = "gas"
    WATER = "water"
    OTHER = "other"

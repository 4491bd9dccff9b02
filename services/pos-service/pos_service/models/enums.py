"""
POS Service — Status vocabularies shared by models, schemas and the lifecycle planner
"""
from enum import Enum


class PaymentStatus(str, Enum):
    IN_PROCESS = "In Process"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class KitchenStatus(str, Enum):
    IN_THE_KITCHEN = "In The Kitchen"
    COOKING_NOW = "Cooking Now"
    READY_TO_SERVE = "Ready To Serve"


class Availability(str, Enum):
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out Of Stock"


class ProductStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ReservationStatus(str, Enum):
    CONFIRMED = "Confirmed"
    CANCELED = "Canceled"


def availability_for(stock: int, low_threshold: int) -> Availability:
    if stock <= 0:
        return Availability.OUT_OF_STOCK
    if stock <= low_threshold:
        return Availability.LOW_STOCK
    return Availability.IN_STOCK


def enum_values(enum_cls) -> list[str]:
    """Persist enum *values* ("In Process"), not member names ("IN_PROCESS")."""
    return [member.value for member in enum_cls]

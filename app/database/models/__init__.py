from .user_model import User, Role
from .building_model import Building
from .apartment_model import Apartment
from .visit_request_model import VisitRequest
from .tenant_model import Tenant
from .payment_model import Payment
from .complaint_model import Complaint
from .venue_booking_model import VenueBooking
from .review_model import Review

__all__ = ["User", "Role", "Building", "Apartment", "VisitRequest", "Tenant", "Payment", "Complaint", "VenueBooking", "Review"]

from .access_control_service import AccessControlService
from .event_service import EventService
from .product_service import ProductService
from .verification_service import VerificationService

__all__ = [
    'AccessControlService', 'EventService', 'ProductService', 'VerificationService'
]

from dataclasses import dataclass

from ..application.services.auth_service import AuthService
from ..application.services.credential_service import CredentialVerifier
from ..application.services.session_service import SessionService
from ..application.services.token_service import TokenService
from .config import Settings
from ..domain.ports.persistence import PersistenceGateway
from ..services.booking_service import BookingService
from ..services.content_service import ContentService
from ..services.email_service import EmailService
from ..services.location_service import LocationService
from ..services.payment_method_service import PaymentMethodService
from ..services.user_service import UserService
from ..services.vehicle_service import VehicleService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    email_service: EmailService
    credential_verifier: CredentialVerifier
    token_service: TokenService
    session_service: SessionService
    auth_service: AuthService
    user_service: UserService
    vehicle_service: VehicleService
    payment_method_service: PaymentMethodService
    booking_service: BookingService
    location_service: LocationService
    content_service: ContentService

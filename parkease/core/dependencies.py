from fastapi import Depends, Request

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_settings(container: ApplicationContainer = Depends(get_container)):
    return container.settings


def get_auth_service(container: ApplicationContainer = Depends(get_container)):
    return container.auth_service


def get_session_service(container: ApplicationContainer = Depends(get_container)):
    return container.session_service


def get_user_service(container: ApplicationContainer = Depends(get_container)):
    return container.user_service


def get_vehicle_service(container: ApplicationContainer = Depends(get_container)):
    return container.vehicle_service


def get_payment_method_service(container: ApplicationContainer = Depends(get_container)):
    return container.payment_method_service


def get_booking_service(container: ApplicationContainer = Depends(get_container)):
    return container.booking_service


def get_location_service(container: ApplicationContainer = Depends(get_container)):
    return container.location_service


def get_content_service(container: ApplicationContainer = Depends(get_container)):
    return container.content_service

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ....core.dependencies import get_payment_method_service
from ....domain.models import SessionUser
from ....services.payment_method_service import PaymentMethodService
from ...api.dependencies import get_current_session
from ...api.schemas.payment_schemas import PaymentMethodCreateRequest, PaymentMethodResponse

router = APIRouter(prefix="/api/payment-methods", tags=["Payment Methods"])


@router.get("", response_model=List[PaymentMethodResponse])
async def list_payment_methods(
    session: SessionUser = Depends(get_current_session),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> List[PaymentMethodResponse]:
    return [PaymentMethodResponse.model_validate(pm) for pm in service.list_payment_methods(session.id)]


@router.post("", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED)
async def add_payment_method(
    payload: PaymentMethodCreateRequest,
    session: SessionUser = Depends(get_current_session),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> PaymentMethodResponse:
    try:
        payment_method = service.add_payment_method(session.id, **payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return PaymentMethodResponse.model_validate(payment_method)


@router.delete("/{payment_method_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment_method(
    payment_method_id: int,
    session: SessionUser = Depends(get_current_session),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> Response:
    service.delete_payment_method(payment_method_id, session.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{payment_method_id}/default", response_model=PaymentMethodResponse)
async def set_default_payment_method(
    payment_method_id: int,
    session: SessionUser = Depends(get_current_session),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> PaymentMethodResponse:
    return PaymentMethodResponse.model_validate(service.set_default(payment_method_id, session.id))

"""Service for saved payment methods (card metadata only)."""

from typing import List, Optional

from parkease.domain.errors import NotFound
from parkease.domain.models.payment_method import PaymentMethod
from parkease.domain.ports.persistence import PaymentMethodRepository


class PaymentMethodService:
    """Service for managing a user's saved cards."""

    def __init__(self, payment_method_repository: PaymentMethodRepository):
        self.payment_method_repository = payment_method_repository

    def list_payment_methods(self, user_id: int) -> List[PaymentMethod]:
        return self.payment_method_repository.list_payment_methods(user_id)

    def add_payment_method(
        self,
        user_id: int,
        brand: str,
        last4: str,
        expiry_month: int,
        expiry_year: int,
        cardholder_name: Optional[str] = None,
        set_as_default: bool = False,
    ) -> PaymentMethod:
        """
        Save card metadata for a user.

        Args:
            user_id: Owner ID
            brand: Card brand (visa, mastercard, ...)
            last4: Last four digits
            expiry_month: Expiry month, 1-12
            expiry_year: Four digit expiry year
            cardholder_name: Name printed on the card
            set_as_default: Make this the default card

        Returns:
            Created PaymentMethod

        Raises:
            ValueError: If fields are invalid or the card is already saved
        """
        brand_clean = brand.strip().lower()
        if not brand_clean:
            raise ValueError("Card brand is required.")
        if len(last4) != 4 or not last4.isdigit():
            raise ValueError("last4 must be exactly four digits.")
        if not 1 <= expiry_month <= 12:
            raise ValueError("Expiry month must be between 1 and 12.")

        existing = self.payment_method_repository.find_payment_method(
            user_id, brand_clean, last4, expiry_month, expiry_year
        )
        if existing:
            raise ValueError("Card already exists.")

        is_first = not self.payment_method_repository.list_payment_methods(user_id)
        payment_method = self.payment_method_repository.create_payment_method(
            user_id=user_id,
            brand=brand_clean,
            last4=last4,
            expiry_month=expiry_month,
            expiry_year=expiry_year,
            cardholder_name=cardholder_name,
        )
        if set_as_default or is_first:
            return self.set_default(payment_method.id, user_id)
        return payment_method

    def delete_payment_method(self, payment_method_id: int, user_id: int) -> None:
        if not self.payment_method_repository.delete_payment_method(payment_method_id, user_id):
            raise NotFound("Payment method not found.")

    def set_default(self, payment_method_id: int, user_id: int) -> PaymentMethod:
        if not self.payment_method_repository.set_default_payment_method(payment_method_id, user_id):
            raise NotFound("Payment method not found.")
        payment_method = self.payment_method_repository.get_payment_method(payment_method_id, user_id)
        if not payment_method:
            raise NotFound("Payment method not found.")
        return payment_method

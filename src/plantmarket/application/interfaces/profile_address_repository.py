from abc import ABC, abstractmethod

from plantmarket.domain.entities.shipping_address import ShippingAddress


class ProfileAddressRepository(ABC):
    """Port for a user's default shipping address."""

    @abstractmethod
    async def save_default(self, user_id: str, address: ShippingAddress) -> None:
        ...

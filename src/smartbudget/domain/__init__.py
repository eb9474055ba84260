"""Domain layer: gateway protocol and typed records."""

from .gateway import Collection, DataGateway, Order

__all__ = ["Collection", "DataGateway", "Order"]

from pydantic import BaseModel, field_validator

from gem_admin.services.status import OrderStatus, parse_status


class OrderStatusUpdate(BaseModel):
    status: OrderStatus

    @field_validator("status", mode="before")
    @classmethod
    def _any_case(cls, v):
        # The list view shows statuses lowercased; accept either spelling
        return parse_status(OrderStatus, v) if isinstance(v, str) else v

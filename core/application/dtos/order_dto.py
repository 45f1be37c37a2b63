"""Application DTOs for Order operations."""

from pydantic import BaseModel, ConfigDict, Field


class OrderUpdateRequest(BaseModel):
    """
    Request DTO for a status update.

    Only orderId and status are required. Any other field in the body is
    kept in ``model_extra`` and written to the stored order as-is.
    """

    order_id: str = Field(..., alias="orderId", description="Order id (digits only)")
    status: int = Field(..., description="Target status (2=Processing, 3=Complete)")

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    @property
    def extra_fields(self) -> dict:
        """Fields supplied besides orderId and status."""
        return dict(self.model_extra or {})

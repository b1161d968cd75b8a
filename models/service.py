"""
Service catalog model for the Availability Engine.
"""

from pydantic import BaseModel, Field, ConfigDict


class Service(BaseModel):
    """
    A bookable service.
    Buffers are business-internal padding (setup, cleanup) that must stay unbooked
    around every appointment of this service.
    """

    # --- Core Identity ---
    id: str = Field(description="Unique identifier for the service")
    name: str = Field(default="", description="Human-readable name")

    # --- Timing ---
    duration_minutes: int = Field(gt=0, description="Length of the service itself")

    buffer_before_minutes: int = Field(
        default=0,
        ge=0,
        description="Padding required immediately before the appointment starts"
    )
    buffer_after_minutes: int = Field(
        default=0,
        ge=0,
        description="Padding required immediately after the appointment ends"
    )

    is_active: bool = Field(default=True, description="Inactive services cannot be newly booked")

    @property
    def total_block_minutes(self) -> int:
        """Minutes removed from the calendar by one booking, buffers included."""
        return self.buffer_before_minutes + self.duration_minutes + self.buffer_after_minutes

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "svc_facial_60",
            "name": "Signature Facial",
            "duration_minutes": 60,
            "buffer_before_minutes": 10,
            "buffer_after_minutes": 15,
            "is_active": True
        }
    })

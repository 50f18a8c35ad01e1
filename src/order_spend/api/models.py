"""Pydantic models for API request payloads."""

from datetime import date
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field

from order_spend.domain.orders import UNKNOWN_RESTAURANT, OrderRecord


class LoginRequest(BaseModel):
    """Start a login with a mobile number."""

    mobile_number: str = Field(default="", alias="mobileNumber")


class OtpRequest(BaseModel):
    """Submit the OTP for a session."""

    session_id: str = Field(default="", alias="sessionId")
    otp: str = ""


class SessionRequest(BaseModel):
    """Reference an existing session."""

    session_id: str = Field(default="", alias="sessionId")


class OrderPayload(BaseModel):
    """Order as supplied to the analysis endpoints."""

    order_date: date = Field(alias="date")
    amount: Decimal = Field(ge=0)
    restaurant_name: str = Field(
        default=UNKNOWN_RESTAURANT,
        validation_alias=AliasChoices("restaurantName", "restaurant"),
    )

    def to_record(self) -> OrderRecord:
        return OrderRecord(
            date=self.order_date,
            amount=self.amount,
            restaurant_name=self.restaurant_name,
        )


class AnalyzeRequest(BaseModel):
    """Orders to summarize."""

    orders: list[OrderPayload] | None = None


class AnalyzeRangeRequest(BaseModel):
    """Orders to summarize within an inclusive date range."""

    orders: list[OrderPayload] | None = None
    start_date: date | None = Field(default=None, alias="startDate")
    end_date: date | None = Field(default=None, alias="endDate")

"""Pydantic models for the JSON API.

Request bodies are deliberately permissive: amounts arrive as numbers or
strings and identifiers may be missing, and the service layer turns those
cases into field-specific validation errors.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CreatePaymentIntentRequestJSON(BaseModel):
    """JSON request model for creating a payment intent."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "amount": 29.99,
                "currency": "USD",
                "orderId": "ORD-1",
            }
        },
    )

    amount: Any = Field(None, description="Amount in major units (e.g. 29.99)")
    currency: Optional[str] = Field(None, description="ISO 4217 currency code, defaults to USD")
    order_id: Any = Field(None, alias="orderId", description="Merchant order identifier")


class CreatePaymentIntentResponseJSON(BaseModel):
    """JSON response model for a created payment intent."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "id": "int_1",
                "clientSecret": "sec_1",
                "status": "REQUIRES_PAYMENT_METHOD",
                "amount": 2999,
                "currency": "USD",
            }
        },
    )

    success: bool = True
    id: str = Field(..., description="Payment intent ID")
    client_secret: str = Field(..., alias="clientSecret", description="Client secret for the payer's browser")
    status: Optional[str] = Field(None, description="Payment intent status")
    amount: Any = Field(None, description="Amount as reported by Airwallex (minor units)")
    currency: Optional[str] = Field(None, description="Currency code")


class ConfirmPaymentRequestJSON(BaseModel):
    """JSON request model for confirming a payment intent."""

    model_config = ConfigDict(populate_by_name=True)

    payment_intent_id: Any = Field(None, alias="paymentIntentId", description="Payment intent ID")
    payment_method_id: Any = Field(None, alias="paymentMethodId", description="Payment method ID")


class ConfirmPaymentResponseJSON(BaseModel):
    """JSON response model for a confirmed payment intent."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    status: Optional[str] = Field(None, description="Payment intent status after confirmation")
    payment_intent: Dict[str, Any] = Field(..., alias="paymentIntent", description="Payment intent as returned by Airwallex")


class PaymentStatusResponseJSON(BaseModel):
    """JSON response model for payment status lookups.

    Optional identifiers are omitted from the response when Airwallex does
    not report them.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    status: Optional[str] = Field(None, description="Payment intent status")
    amount: Any = Field(None, description="Amount (minor units)")
    currency: Optional[str] = Field(None, description="Currency code")
    customer_id: Optional[str] = Field(None, alias="customerId", description="Airwallex customer ID")
    merchant_order_id: Optional[str] = Field(None, alias="merchantOrderId", description="Merchant order ID")


class HealthResponseJSON(BaseModel):
    """JSON response model for the liveness probe."""

    status: str = "OK"
    service: str
    timestamp: str


class WebhookAckJSON(BaseModel):
    """Acknowledgement returned for every accepted webhook delivery."""

    received: bool = True

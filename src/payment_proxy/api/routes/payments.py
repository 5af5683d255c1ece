"""Payment intent endpoints.

- POST /create-payment-intent: create an intent for an order
- POST /confirm-payment: confirm an intent with a payment method
- GET /payment-status/{payment_intent_id}: read an intent's status

Failures propagate as ``PaymentError`` and are rendered by the handlers in
``payment_proxy.api.errors``.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from payment_proxy.api.dependencies import Payments
from payment_proxy.api.models import (
    ConfirmPaymentRequestJSON,
    ConfirmPaymentResponseJSON,
    CreatePaymentIntentRequestJSON,
    CreatePaymentIntentResponseJSON,
    PaymentStatusResponseJSON,
)

router = APIRouter()


@router.post("/create-payment-intent", response_model=CreatePaymentIntentResponseJSON)
async def create_payment_intent(
    body: CreatePaymentIntentRequestJSON,
    payments: Payments,
) -> JSONResponse:
    """Create an Airwallex payment intent.

    ``amount`` is in major units; the response reports Airwallex's minor-unit
    amount unchanged.

    Responses:
        200 OK: Intent created
        400 Bad Request: Invalid amount, currency or orderId
        500 Internal Server Error: Configuration or authentication failure
        502 Bad Gateway: Malformed Airwallex response
        503/504: Airwallex unavailable or timed out
    """
    result = await payments.create_intent(body.amount, body.currency, body.order_id)

    response = CreatePaymentIntentResponseJSON(
        id=result.id,
        client_secret=result.client_secret,
        status=result.status,
        amount=result.amount,
        currency=result.currency,
    )
    return JSONResponse(content=response.model_dump(by_alias=True), status_code=200)


@router.post("/confirm-payment", response_model=ConfirmPaymentResponseJSON)
async def confirm_payment(
    body: ConfirmPaymentRequestJSON,
    payments: Payments,
) -> JSONResponse:
    """Confirm a payment intent.

    Responses:
        200 OK: Confirmation forwarded
        400 Bad Request: Missing identifiers
        402 Payment Required: Payment method declined
        404 Not Found: Unknown payment intent
    """
    result = await payments.confirm(body.payment_intent_id, body.payment_method_id)

    response = ConfirmPaymentResponseJSON(
        status=result.status,
        payment_intent=result.raw_intent,
    )
    return JSONResponse(content=response.model_dump(by_alias=True), status_code=200)


@router.get(
    "/payment-status/{payment_intent_id}",
    response_model=PaymentStatusResponseJSON,
    response_model_exclude_unset=True,
)
async def get_payment_status(payment_intent_id: str, payments: Payments) -> JSONResponse:
    """Read the status of a payment intent.

    Any Airwallex failure is reported as 500 "Failed to get payment status".
    """
    status = await payments.get_status(payment_intent_id)

    fields = {
        "success": True,
        "status": status.status,
        "amount": status.amount,
        "currency": status.currency,
    }
    if status.customer_id is not None:
        fields["customer_id"] = status.customer_id
    if status.merchant_order_id is not None:
        fields["merchant_order_id"] = status.merchant_order_id

    response = PaymentStatusResponseJSON(**fields)
    return JSONResponse(
        content=response.model_dump(by_alias=True, exclude_unset=True),
        status_code=200,
    )

"""Payment endpoints -- Razorpay orders, Stripe intents, verification."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.models import User
from backend.schemas import (
    RazorpayOrderRequest,
    RazorpayOrderResponse,
    StripeIntentRequest,
    StripeIntentResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from backend.security import get_current_user, require_kyc
from services.payments_service import PaymentError, PaymentsService, get_payments_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/razorpay/create-order", response_model=RazorpayOrderResponse)
async def create_razorpay_order(
    req: RazorpayOrderRequest,
    user: User = Depends(require_kyc),
    payments: PaymentsService = Depends(get_payments_service),
):
    try:
        order = await payments.create_razorpay_order(req.amount, req.currency)
    except PaymentError as e:
        logger.error("Razorpay order for user %s failed: %s", user.id, e)
        raise HTTPException(status_code=502, detail="Failed to create payment order")
    return RazorpayOrderResponse(**order)


@router.post("/stripe/create-intent", response_model=StripeIntentResponse)
async def create_stripe_intent(
    req: StripeIntentRequest,
    user: User = Depends(require_kyc),
    payments: PaymentsService = Depends(get_payments_service),
):
    try:
        intent = await payments.create_stripe_intent(req.amount, req.currency, user.id)
    except PaymentError as e:
        logger.error("Stripe intent for user %s failed: %s", user.id, e)
        raise HTTPException(status_code=502, detail="Failed to create payment intent")
    return StripeIntentResponse(**intent)


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    req: VerifyPaymentRequest,
    user: User = Depends(get_current_user),
    payments: PaymentsService = Depends(get_payments_service),
):
    is_valid = payments.verify(req.gateway, req.payment_id, req.order_id, req.signature)
    if not is_valid:
        logger.warning("Payment %s (%s) failed verification for user %s", req.payment_id, req.gateway, user.id)
    return VerifyPaymentResponse(is_valid=is_valid)

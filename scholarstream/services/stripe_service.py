# scholarstream/services/stripe_service.py
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import stripe

from ..config import ConfigurationError
from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class StripeMisconfiguredError(ConfigurationError):
    """Raised when a Stripe call is attempted without an API key."""
    def __init__(self, missing_config: str = "STRIPE_SECRET_KEY"):
        self.missing_config = missing_config
        super().__init__(f"Stripe misconfigured: Missing {missing_config}")
        self.code = "STRIPE_MISCONFIGURED"


@dataclass
class CheckoutSession:
    """The subset of a Stripe Checkout Session the payment flow relies on."""
    id: str
    url: Optional[str] = None
    payment_status: Optional[str] = None
    payment_intent: Optional[str] = None
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    customer_email: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"

    @classmethod
    def from_stripe(cls, session: Any) -> "CheckoutSession":
        intent = getattr(session, "payment_intent", None)
        # payment_intent comes back as an id unless the caller expanded it
        if intent is not None and not isinstance(intent, str):
            intent = getattr(intent, "id", None)
        return cls(
            id=session.id,
            url=getattr(session, "url", None),
            payment_status=getattr(session, "payment_status", None),
            payment_intent=intent,
            amount_total=getattr(session, "amount_total", None),
            currency=getattr(session, "currency", None),
            customer_email=getattr(session, "customer_email", None),
            metadata=_plain_metadata(getattr(session, "metadata", None)),
        )


def _plain_metadata(metadata) -> Dict[str, str]:
    # StripeObject is no longer a dict subclass in current SDK releases
    if not metadata:
        return {}
    if hasattr(metadata, "to_dict"):
        return metadata.to_dict()
    return dict(metadata)


@contextmanager
def stripe_operation_context(operation_name: str, **context_vars):
    """Log start/end of a Stripe call and turn Stripe failures into UpstreamError."""
    start_time = datetime.now()
    logger.info(
        f"Starting Stripe operation: {operation_name}",
        extra={"operation": operation_name, **context_vars},
    )
    try:
        yield
    except stripe.StripeError as e:
        duration = (datetime.now() - start_time).total_seconds()
        logger.error(
            f"Stripe operation failed: {operation_name}",
            exc_info=True,
            extra={
                "operation": operation_name,
                "duration_seconds": duration,
                "error_type": type(e).__name__,
                "stripe_error": str(e),
                **context_vars,
            },
        )
        raise UpstreamError("Payment provider error") from e
    duration = (datetime.now() - start_time).total_seconds()
    logger.info(
        f"Completed Stripe operation: {operation_name}",
        extra={"operation": operation_name, "duration_seconds": duration, **context_vars},
    )


class StripeGateway:
    """
    Thin wrapper around Stripe Checkout.

    The API key is passed per request instead of being set on the
    ``stripe`` module, so several apps (and tests) can coexist in one
    process.
    """

    def __init__(self, api_key: Optional[str], currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    def _require_key(self) -> str:
        if not self.api_key:
            logger.error("Stripe misconfigured - missing API key")
            raise StripeMisconfiguredError("STRIPE_SECRET_KEY")
        return self.api_key

    def create_checkout_session(
        self,
        *,
        amount_cents: int,
        product_name: str,
        customer_email: Optional[str],
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> CheckoutSession:
        api_key = self._require_key()
        with stripe_operation_context(
            "create_checkout_session",
            amount_cents=amount_cents,
            metadata=metadata or {},
        ):
            params = {
                "mode": "payment",
                "line_items": [
                    {
                        "price_data": {
                            "currency": self.currency,
                            "unit_amount": amount_cents,
                            "product_data": {"name": product_name},
                        },
                        "quantity": 1,
                    }
                ],
                "metadata": metadata or {},
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
            if customer_email:
                params["customer_email"] = customer_email
            session = stripe.checkout.Session.create(api_key=api_key, **params)
        logger.info(
            "Stripe checkout session created",
            extra={"session_id": session.id, "url": getattr(session, "url", None)},
        )
        return CheckoutSession.from_stripe(session)

    def retrieve_session(self, session_id: str) -> CheckoutSession:
        api_key = self._require_key()
        with stripe_operation_context("retrieve_checkout_session", session_id=session_id):
            session = stripe.checkout.Session.retrieve(session_id, api_key=api_key)
        return CheckoutSession.from_stripe(session)

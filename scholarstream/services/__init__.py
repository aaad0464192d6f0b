# scholarstream/services/__init__.py
from dataclasses import dataclass

from .applications import ApplicationWorkflow
from .payments import PaymentService
from .reviews import ReviewWorkflow
from .scholarships import ScholarshipCatalog
from .stripe_service import CheckoutSession, StripeGateway, StripeMisconfiguredError
from .users import UserDirectory


@dataclass
class Services:
    """Everything a request handler needs, built once per app."""
    store: object
    identity: object
    gateway: object
    users: UserDirectory
    scholarships: ScholarshipCatalog
    applications: ApplicationWorkflow
    reviews: ReviewWorkflow
    payments: PaymentService


def build_services(config, store, identity, gateway):
    catalog = ScholarshipCatalog(
        store,
        latest_limit=config.get("LATEST_SCHOLARSHIPS_LIMIT", 8),
        max_page_size=config.get("MAX_PAGE_SIZE", 50),
    )
    return Services(
        store=store,
        identity=identity,
        gateway=gateway,
        users=UserDirectory(store),
        scholarships=catalog,
        applications=ApplicationWorkflow(store, catalog),
        reviews=ReviewWorkflow(store, catalog),
        payments=PaymentService(
            store,
            gateway,
            site_domain=config.get("SITE_DOMAIN"),
            currency=config.get("STRIPE_CURRENCY", "usd"),
            tracking_prefix=config.get("TRACKING_ID_PREFIX", "PRCL"),
        ),
    )


__all__ = [
    "Services",
    "build_services",
    "ApplicationWorkflow",
    "CheckoutSession",
    "PaymentService",
    "ReviewWorkflow",
    "ScholarshipCatalog",
    "StripeGateway",
    "StripeMisconfiguredError",
    "UserDirectory",
]

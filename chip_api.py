import logging
from typing import Optional

from credentials import CredentialProvider
from lookup import ProductLookup
from models import Product
from offers import OfferSelector
from transport import ChipApiClient

logger = logging.getLogger("chip_api")


class ChipApi:
    """Service wrapper composing product lookup and offer selection."""

    def __init__(
        self,
        client: Optional[ChipApiClient] = None,
        credentials: Optional[CredentialProvider] = None,
    ):
        if client is None:
            # Fails fast with ConfigurationError before any request is made.
            client = ChipApiClient.from_credentials(credentials or CredentialProvider())
        self.client = client
        self.product_lookup = ProductLookup(client)
        self.offer_selector = OfferSelector(client)

    def get_product(self, code: str) -> Product:
        """Product attributes plus the selected offers and their merchants for an ASIN / EAN."""
        product = self.product_lookup.lookup(code)
        return self.offer_selector.select_offers(product)

    def log_exception(self, exc: Exception) -> None:
        kind = getattr(exc, "kind", type(exc).__name__)
        logger.error(f"{kind}: {exc}")

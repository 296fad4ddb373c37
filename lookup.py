import logging

from pydantic import ValidationError

from errors import NotFoundError, TransportError
from models import Product
from normalization import normalize_code

logger = logging.getLogger(__name__)

PRODUCT_PATH = "/bc/product"
PRODUCT_FIELDS = "name,fullName,asin"


class ProductLookup:
    """Resolves an ASIN / EAN code to exactly one BestCheck product."""

    def __init__(self, client):
        self.client = client

    def lookup(self, code: str) -> Product:
        query = {
            "filter": {
                "asin.in": normalize_code(code),
            },
            "fields": {
                "product": PRODUCT_FIELDS,
            },
        }
        # ApiError is raised by the client before the match count is looked at.
        document = self.client.request(PRODUCT_PATH, query)
        if document.total != 1 or not document.data:
            logger.info(f"ProductLookup: {document.total} matches for code {code}.")
            raise NotFoundError(code)

        try:
            product = Product.from_resource(document.data[0])
        except ValidationError as e:
            raise TransportError(f"Malformed product record for code {code}: {e}") from e
        logger.info(f"ProductLookup: Code {code} resolved to product {product.id}.")
        return product

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from config import settings
from errors import NoOffersError, TransportError
from models import ApiDocument, Merchant, Offer, Product

logger = logging.getLogger(__name__)

OFFER_FIELDS = "description,price,currency,deeplink,merchant"
MERCHANT_FIELDS = "name,url,active"


class OfferSelector:
    """Picks the offers shown for a product.

    The cheapest offer of at most `max_non_amazon` distinct merchants, plus the
    cheapest Amazon offer. The API returns offers by ascending price, so the
    first offer seen for a merchant is its cheapest one. When the batch carries
    no Amazon merchant at all, a second single-offer query filtered on the
    Amazon merchant name backfills it.
    """

    def __init__(
        self,
        client,
        batch_size: Optional[int] = None,
        max_non_amazon: Optional[int] = None,
        amazon_name: Optional[str] = None,
        api_version: Optional[str] = None,
    ):
        self.client = client
        self.batch_size = settings.OFFER_BATCH_SIZE if batch_size is None else batch_size
        self.max_non_amazon = settings.MAX_NON_AMAZON_OFFERS if max_non_amazon is None else max_non_amazon
        self.amazon_name = amazon_name or settings.AMAZON_MERCHANT_NAME
        self.path = f"/bc/apps/v{api_version or settings.API_VERSION}/cheapest_offers"

    def _offer_query(self, product_id: str, offer_count: int, merchant_name: Optional[str] = None) -> Dict[str, Any]:
        query: Dict[str, Any] = {
            "filter": {
                "product.id.in": product_id,
            },
            "offerCount": offer_count,
            "fields": {
                "offer": OFFER_FIELDS,
                "merchant": MERCHANT_FIELDS,
            },
        }
        if merchant_name:
            query["filter"]["merchant.name.in"] = merchant_name
        return query

    def _is_amazon(self, merchant: Merchant) -> bool:
        return merchant.name == self.amazon_name

    def _index_merchants(self, document: ApiDocument) -> Tuple[Dict[str, Merchant], bool]:
        """Map merchant id to merchant and report whether Amazon must be fetched separately."""
        merchants: Dict[str, Merchant] = {}
        must_fetch_amazon = True
        for resource in document.included_of_type("merchant"):
            merchant = self._parse(Merchant, resource)
            merchants[merchant.id] = merchant
            if self._is_amazon(merchant):
                must_fetch_amazon = False
        return merchants, must_fetch_amazon

    @staticmethod
    def _parse(model, resource: Dict[str, Any]):
        try:
            return model.from_resource(resource)
        except ValidationError as e:
            raise TransportError(f"Malformed {model.__name__.lower()} record {resource.get('id')}: {e}") from e

    def _parse_offers(self, data: List[Dict[str, Any]]) -> List[Offer]:
        return [self._parse(Offer, resource) for resource in data]

    def select_offers(self, product: Product) -> Product:
        document = self.client.request(self.path, self._offer_query(product.id, self.batch_size))
        if document.meta is None or not document.data:
            raise NoOffersError(product.id)

        merchants, must_fetch_amazon = self._index_merchants(document)
        add_amazon_price = not must_fetch_amazon
        count_non_amazon = 0
        selected_offers: Dict[str, Offer] = {}
        selected_merchants: Dict[str, Merchant] = {}

        for offer in self._parse_offers(document.data):
            if offer.merchantId in selected_merchants:
                # Only the first (cheapest) offer per merchant.
                continue
            merchant = merchants.get(offer.merchantId)
            if merchant is None:
                logger.warning(f"OfferSelector: Offer {offer.id} references unknown merchant {offer.merchantId}, skipping.")
                continue

            if add_amazon_price and self._is_amazon(merchant):
                selected_offers[offer.id] = offer
                selected_merchants[merchant.id] = merchant
                add_amazon_price = False
            elif count_non_amazon < self.max_non_amazon:
                selected_offers[offer.id] = offer
                selected_merchants[merchant.id] = merchant
                count_non_amazon += 1

            if count_non_amazon == self.max_non_amazon and not add_amazon_price:
                break

        if add_amazon_price:
            logger.warning(f"OfferSelector: Amazon merchant included for product {product.id} but none of its offers was returned.")

        if must_fetch_amazon:
            backfill = self._fetch_amazon_offer(product.id)
            if backfill is not None:
                offer, merchant = backfill
                selected_offers[offer.id] = offer
                selected_merchants[merchant.id] = merchant

        product.offers = selected_offers
        product.merchants = selected_merchants
        logger.info(
            f"OfferSelector: Selected {len(selected_offers)} offers from {len(selected_merchants)} merchants "
            f"for product {product.id} (batch of {len(document.data)})."
        )
        return product

    def _fetch_amazon_offer(self, product_id: str) -> Optional[Tuple[Offer, Merchant]]:
        """Fetch the cheapest Amazon offer; None when Amazon does not list the product.

        An offer delivered without its merchant record is skipped, like in the
        main batch.
        """
        logger.info(f"OfferSelector: No Amazon offer in batch for product {product_id}, fetching separately.")
        query = self._offer_query(product_id, 1, merchant_name=self.amazon_name)
        document = self.client.request(self.path, query)
        if not document.data:
            logger.info(f"OfferSelector: No Amazon offer available for product {product_id}.")
            return None

        offer = self._parse(Offer, document.data[0])
        merchant = None
        for resource in document.included_of_type("merchant"):
            candidate = self._parse(Merchant, resource)
            if candidate.id == offer.merchantId:
                merchant = candidate
                break
        if merchant is None:
            logger.warning(f"OfferSelector: Amazon offer {offer.id} references unknown merchant {offer.merchantId}, skipping.")
            return None
        return offer, merchant

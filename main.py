import argparse
import json
import logging
import sys
from typing import List, Optional

# Local imports
from chip_api import ChipApi
from config import settings
from credentials import CredentialProvider, SETTINGS_BA_PASSWORD, SETTINGS_BA_USERNAME
from errors import ChipApiError, ConfigurationError
from models import Product
from normalization import normalize_whitespace

logger = logging.getLogger("ChipApi")


def summarize_product(product: Product) -> List[str]:
    """Human readable lines describing a looked-up product."""
    attributes = product.attributes
    lines = [
        f"ASIN: {', '.join(attributes.asin)}",
        f"EAN: {', '.join(attributes.gtins)}",
        f"Title: {normalize_whitespace(attributes.fullName or attributes.name or '')}",
    ]
    prices = [f"{offer.price} {offer.currency}" for offer in product.offers.values()]
    label = "The cheapest 3 offers plus Amazon: " if len(product.offers) > 3 else "The cheapest 3 offers: "
    lines.append(label + ", ".join(prices))
    lines.append(f"Offer IDs: {', '.join(product.offers.keys())}")
    lines.append(f"Detail Page URL: {settings.DETAIL_PAGE_BASE_URL}{product.id}")
    return lines


def run_lookup(args: argparse.Namespace) -> int:
    try:
        api = ChipApi()
    except ConfigurationError as e:
        logger.error(f"{e.kind}: {e}")
        return 1
    try:
        product = api.get_product(args.code)
    except ChipApiError as e:
        api.log_exception(e)
        return 1

    if args.json:
        print(json.dumps(product.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        for line in summarize_product(product):
            print(line)
    return 0


def run_configure(args: argparse.Namespace) -> int:
    provider = CredentialProvider()
    values = {}
    if args.username is not None:
        values[SETTINGS_BA_USERNAME] = args.username
    if args.password is not None:
        values[SETTINGS_BA_PASSWORD] = args.password
    if not values:
        logger.error("Nothing to configure, pass --username and/or --password.")
        return 2
    provider.save_settings(values)
    logger.info(f"Settings saved to {provider.store.path}.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BestCheck product and offer lookup")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="Look up a product by ASIN or EAN code")
    lookup.add_argument("code", help="ASIN (10 letters/digits) or EAN-13 code")
    lookup.add_argument("--json", action="store_true", help="Print the enriched product as JSON")
    lookup.set_defaults(func=run_lookup)

    configure = subparsers.add_parser("configure", help="Persist HTTP authentication credentials")
    configure.add_argument("--username", help="HTTP Basic username")
    configure.add_argument("--password", help="HTTP Basic password")
    configure.set_defaults(func=run_configure)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    # Configure structured logging
    logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

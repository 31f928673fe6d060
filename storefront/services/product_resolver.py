# storefront/services/product_resolver.py
from typing import Iterable, List, Optional

import requests
from pydantic import ValidationError

from storefront.domain.schemas import CartLine, PersistedCartEntry
from storefront.repos.local_cart_repo import LocalCartRepo
from storefront.services.api_client import ApiError
from storefront.services.product_client import ProductClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductResolver:
    """Hydratacja lokalnych pozycji koszyka danymi produktu z katalogu."""

    def __init__(self, product_client: ProductClient, local_repo: LocalCartRepo):
        self.product_client = product_client
        self.local_repo = local_repo

    def resolve(self, entry: PersistedCartEntry) -> Optional[CartLine]:
        try:
            product = self.product_client.fetch_product(entry.product_id)
        except (ApiError, ValidationError, requests.RequestException) as e:
            logger.warning(f"Product {entry.product_id} not found, removing from cart: {e}")
            return None

        return CartLine(product_id=entry.product_id, quantity=entry.quantity, product=product)

    def resolve_all(self, entries: Iterable[PersistedCartEntry]) -> List[CartLine]:
        entries = list(entries)
        lines = [line for line in (self.resolve(e) for e in entries) if line is not None]

        if len(lines) != len(entries):
            # samonaprawa snapshotu, zeby nie powtarzac nieudanych zapytan
            logger.info(f"Dropped {len(entries) - len(lines)} unresolvable cart entries")
            self.local_repo.save(line.to_entry() for line in lines)

        return lines

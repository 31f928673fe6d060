# storefront/services/product_client.py
from urllib.parse import quote

from storefront.domain.schemas import Product
from storefront.services.api_client import ApiClient, ApiError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    def __init__(self, api: ApiClient):
        self.api = api

    def fetch_product(self, product_id: str) -> Product:
        data = self.api.get(f"/products/{quote(product_id, safe='')}")
        if not isinstance(data, dict):
            raise ApiError(f"Product {product_id} not found", status_code=404)
        return Product.model_validate(data)

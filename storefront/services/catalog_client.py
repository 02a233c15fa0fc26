# storefront/services/catalog_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import CATALOG_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogClient:
    """Aktualna cena / zdjecie / kategoria produktu, tylko do renderowania."""

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or CATALOG_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def fetch_product(self, product_id: str) -> dict:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

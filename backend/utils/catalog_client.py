# backend/utils/catalog_client.py
import httpx
import logging
from typing import List, Optional

from config import settings

logger = logging.getLogger(__name__)

class CatalogClient:
    """Thin client for the public product catalog (Fake Store API shape)."""

    def __init__(self, url: str = None, timeout: float = None, transport: httpx.BaseTransport = None):
        self.url = url or settings.CATALOG_URL
        self.timeout = timeout if timeout is not None else settings.CATALOG_TIMEOUT
        # Tests inject httpx.MockTransport here
        self.transport = transport

    def fetch_raw(self) -> list:
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.get(self.url)
                response.raise_for_status()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Catalog request failed: {e}")
                raise
            data = response.json()
        if not isinstance(data, list):
            raise ValueError("Catalog response is not a list")
        return data

    def fetch_products(self, limit: Optional[int] = None) -> List[dict]:
        items = self.fetch_raw()
        if limit is not None:
            items = items[:limit]
        return [simplify(p) for p in items]


def _as_price(value) -> float:
    try:
        return float(value) or 0.0
    except (TypeError, ValueError):
        return 0.0

def simplify(item: dict) -> dict:
    # Map a catalog record to {id, name, price}
    if not isinstance(item, dict):
        raise ValueError(f"Unexpected catalog entry: {item!r}")
    name = item.get("title") or item.get("name") or f"Item {item.get('id')}"
    return {"id": item.get("id"), "name": name, "price": _as_price(item.get("price"))}

catalog_client = CatalogClient()

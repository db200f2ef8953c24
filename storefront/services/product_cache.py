"""
Product Cache Service
In-memory TTL cache for product records and product image bytes

Purpose:
- Serve repeated product lookups (task board, order history) without a query each
- Keep image payloads around longer than product records
- Collapse concurrent fetches of the same id into one backend call

Author: TM3
Date: 2026-03-02
"""
import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from storefront.core.config import settings
from storefront.domain.product import Product

logger = logging.getLogger(__name__)


class _PendingFetch:
    """A fetch in progress that other callers can wait on"""

    def __init__(self):
        self.event = threading.Event()
        self.value = None
        self.error: Optional[BaseException] = None


class ProductCache:
    """
    TTL cache keyed by product id and image file id.

    Features:
    - Separate TTLs for products and images
    - In-flight fetch deduplication per key
    - Batch fetch that only queries the ids that are missing
    - Explicit cleanup of expired entries
    """

    def __init__(
        self,
        product_ttl: Optional[int] = None,
        image_ttl: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.product_ttl = product_ttl if product_ttl is not None else settings.PRODUCT_CACHE_TTL
        self.image_ttl = image_ttl if image_ttl is not None else settings.IMAGE_CACHE_TTL
        self._clock = clock
        self._lock = threading.Lock()
        self._products: Dict[str, Tuple[float, Product]] = {}
        self._images: Dict[str, Tuple[float, bytes]] = {}
        self._pending: Dict[str, _PendingFetch] = {}

    def _fresh(self, entry: Optional[Tuple[float, object]], ttl: int) -> bool:
        return entry is not None and (self._clock() - entry[0]) < ttl

    def _get_or_fetch(self, namespace: str, store: Dict, ttl: int, key: str, fetch: Callable):
        pending_key = f"{namespace}:{key}"

        with self._lock:
            entry = store.get(key)
            if self._fresh(entry, ttl):
                return entry[1]

            pending = self._pending.get(pending_key)
            owner = pending is None
            if owner:
                pending = _PendingFetch()
                self._pending[pending_key] = pending

        if not owner:
            pending.event.wait()
            if pending.error is not None:
                raise pending.error
            return pending.value

        try:
            value = fetch(key)
            pending.value = value
            if value is not None:
                with self._lock:
                    store[key] = (self._clock(), value)
            return value
        except Exception as e:
            pending.error = e
            raise
        finally:
            with self._lock:
                self._pending.pop(pending_key, None)
            pending.event.set()

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._lock:
            entry = self._products.get(product_id)
            return entry[1] if self._fresh(entry, self.product_ttl) else None

    def set_product(self, product: Product):
        with self._lock:
            self._products[product.id] = (self._clock(), product)

    def invalidate_product(self, product_id: str):
        with self._lock:
            self._products.pop(product_id, None)

    def get_or_fetch_product(
        self,
        product_id: str,
        fetch: Callable[[str], Optional[Product]]
    ) -> Optional[Product]:
        """Cached product, or the result of `fetch` (cached unless None)"""
        return self._get_or_fetch("product", self._products, self.product_ttl, product_id, fetch)

    def batch_fetch(
        self,
        product_ids: Sequence[str],
        fetch_many: Callable[[List[str]], List[Product]]
    ) -> Dict[str, Product]:
        """
        Resolve many ids with one backend call for the misses

        Returns:
            product id -> Product for every id that exists
        """
        found: Dict[str, Product] = {}
        missing: List[str] = []

        for product_id in dict.fromkeys(product_ids):
            product = self.get_product(product_id)
            if product is not None:
                found[product_id] = product
            else:
                missing.append(product_id)

        if missing:
            for product in fetch_many(missing):
                self.set_product(product)
                found[product.id] = product

        return found

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def get_or_fetch_image(self, file_id: str, fetch: Callable[[str], bytes]) -> bytes:
        return self._get_or_fetch("image", self._images, self.image_ttl, file_id, fetch)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def clean_expired(self) -> int:
        """Drop expired entries, returns how many were removed"""
        removed = 0
        with self._lock:
            for store, ttl in ((self._products, self.product_ttl), (self._images, self.image_ttl)):
                for key in [k for k, entry in store.items() if not self._fresh(entry, ttl)]:
                    del store[key]
                    removed += 1
        if removed:
            logger.debug(f"Product cache dropped {removed} expired entries")
        return removed

    def clear(self):
        with self._lock:
            self._products.clear()
            self._images.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "products": len(self._products),
                "images": len(self._images),
                "pending": len(self._pending),
            }


# Singleton instance for use across the application
_product_cache: Optional[ProductCache] = None


def get_product_cache() -> ProductCache:
    """Get or create the ProductCache singleton"""
    global _product_cache
    if _product_cache is None:
        _product_cache = ProductCache()
    return _product_cache

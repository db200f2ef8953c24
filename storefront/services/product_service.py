"""
Product Service
Catalog management, image uploads and cached product reads

Author: TM3
Date: 2026-03-02
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from storefront.core.errors import NotFoundError
from storefront.domain.product import Product, ProductCreate, ProductUpdate
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.storage_repository import StorageRepository
from storefront.services.product_cache import ProductCache, get_product_cache

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """An uploaded image file as received from a form"""
    content: bytes
    filename: str
    content_type: Optional[str] = None


class ProductService:

    def __init__(
        self,
        products: Optional[ProductRepository] = None,
        storage: Optional[StorageRepository] = None,
        cache: Optional[ProductCache] = None
    ):
        self.products = products or ProductRepository()
        self.storage = storage or StorageRepository()
        self.cache = cache or get_product_cache()

    # Images

    def upload_product_image(self, upload: ImageUpload) -> str:
        return self.storage.upload(upload.content, upload.filename, upload.content_type)

    def upload_product_images(self, uploads: Sequence[ImageUpload]) -> List[str]:
        return [self.upload_product_image(upload) for upload in uploads if upload.content]

    def get_product_image(self, file_id: str) -> bytes:
        return self.cache.get_or_fetch_image(file_id, self.storage.download)

    def image_url(self, file_id: str) -> str:
        return f"/api/v1/products/images/{file_id}"

    # Products

    def create_product(self, data: ProductCreate) -> Product:
        product = self.products.create(data)
        self.cache.set_product(product)
        logger.info(f"Created product {product.id} ({product.name})")
        return product

    def create_product_with_images(self, data: ProductCreate, uploads: Sequence[ImageUpload]) -> Product:
        uploaded = self.upload_product_images(uploads)
        data = data.model_copy(update={"image_urls": list(data.image_urls) + uploaded})
        return self.create_product(data)

    def get_products(self, limit: int = 10000, offset: int = 0, keyword: str = "") -> Tuple[List[Product], int]:
        products, total = self.products.find_all(keyword=keyword or None, limit=limit, offset=offset)
        for product in products:
            self.cache.set_product(product)
        return products, total

    def get_product_by_id(self, product_id: str) -> Product:
        product = self.cache.get_or_fetch_product(product_id, self.products.find_by_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def get_products_by_ids(self, product_ids: Sequence[str]) -> Dict[str, Product]:
        return self.cache.batch_fetch(product_ids, self.products.find_by_ids)

    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        product = self.products.update(product_id, fields)
        if product is None:
            raise NotFoundError("Product not found")
        self.cache.set_product(product)
        return product

    def update_product_with_images(
        self,
        product_id: str,
        data: ProductUpdate,
        uploads: Sequence[ImageUpload],
        keep_existing_images: bool = True
    ) -> Product:
        """
        Update a product and its gallery

        The new gallery is the existing images (when kept), then any
        image ids passed in `data.image_urls`, then freshly uploaded files.
        """
        current = self.get_product_by_id(product_id)

        image_urls: List[str] = list(current.image_urls) if keep_existing_images else []
        for url in data.image_urls or []:
            if url not in image_urls:
                image_urls.append(url)
        image_urls.extend(self.upload_product_images(uploads))

        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        fields["image_urls"] = image_urls

        product = self.products.update(product_id, fields)
        if product is None:
            raise NotFoundError("Product not found")
        self.cache.set_product(product)
        return product

    def take_stock(self, product_id: str, units: int) -> Optional[Product]:
        """Remove units from stock; None when short on stock"""
        product = self.products.decrement_quantity(product_id, units)
        if product is None:
            self.cache.invalidate_product(product_id)
        else:
            self.cache.set_product(product)
        return product

    def delete_product(self, product_id: str) -> None:
        if not self.products.delete(product_id):
            raise NotFoundError("Product not found")
        self.cache.invalidate_product(product_id)
        logger.info(f"Deleted product {product_id}")

    def admin_delete_product(self, product_id: str) -> None:
        self.delete_product(product_id)


_product_service: Optional[ProductService] = None


def get_product_service() -> ProductService:
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service

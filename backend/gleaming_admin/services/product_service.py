"""
Product Service - catalog management with bestseller mirroring
"""
import logging
from typing import List, Optional

from gleaming_admin.core.database import new_document_id
from gleaming_admin.core.exceptions import ProductNotFoundError
from gleaming_admin.domain.product import PRODUCT_CATEGORIES, Product, ProductInput
from gleaming_admin.repositories.product_repository import ProductRepository
from gleaming_admin.services.normalization import normalize_product

logger = logging.getLogger(__name__)


def _filter_value(value: Optional[str]) -> Optional[str]:
    """'all' and blank filters mean no filter"""
    value = (value or "").strip()
    if not value or value.lower() == "all":
        return None
    return value


class ProductService:
    """
    Products of one metal type are listed and edited together; every write
    also sets or removes the product's entry in the bestsellers collection.
    """

    def __init__(self, repository: Optional[ProductRepository] = None):
        self.repository = repository or ProductRepository()

    def list_products(
        self,
        product_type: Optional[str] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        availability: Optional[str] = None,
    ) -> List[Product]:
        return self.repository.find_all(
            product_type=product_type,
            search=_filter_value(search),
            category=_filter_value(category),
            availability=_filter_value(availability),
        )

    def list_bestsellers(
        self,
        product_type: Optional[str] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        availability: Optional[str] = None,
    ) -> List[Product]:
        """Bestsellers are read from the live products so stock counts are current"""
        return self.repository.find_all(
            product_type=product_type,
            search=_filter_value(search),
            category=_filter_value(category),
            availability=_filter_value(availability),
            bestsellers_only=True,
        )

    def get_product(self, product_id: str) -> Product:
        product = self.repository.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def save_product(
        self,
        payload: ProductInput,
        product_id: Optional[str] = None,
        bestseller_only: bool = False,
    ) -> Product:
        """
        Create or update a product.

        Args:
            payload: Validated form data
            product_id: Existing product to edit; None creates a new one
            bestseller_only: Saved from the bestsellers page: the product is
                always a bestseller and is merged into both collections

        Raises:
            ProductNotFoundError: editing a product that does not exist
        """
        document = payload.to_document()

        if bestseller_only:
            document["isBestseller"] = True
            product_id = product_id or new_document_id()
            document["id"] = product_id
            self.repository.merge_bestseller(product_id, document)
            logger.info(f"Saved bestseller {product_id}")

        elif product_id:
            if not self.repository.update(product_id, document):
                raise ProductNotFoundError(product_id)
            logger.info(f"Updated product {product_id} (bestseller={document['isBestseller']})")

        else:
            product_id = new_document_id()
            self.repository.create(product_id, document)
            logger.info(f"Created product {product_id} (bestseller={document['isBestseller']})")

        return normalize_product(document, product_id)

    def delete_product(self, product_id: str):
        """Delete a product and its bestseller mirror"""
        if not self.repository.delete(product_id):
            raise ProductNotFoundError(product_id)
        logger.info(f"Deleted product {product_id}")

    @staticmethod
    def list_categories() -> List[str]:
        return list(PRODUCT_CATEGORIES)

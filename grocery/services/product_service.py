from sqlalchemy.orm import Session

from grocery.data.models.product import ProductModel
from grocery.domain.exceptions import NotFoundError
from grocery.domain.schemas import ProductIn, ProductUpdate
from grocery.repos.product_repo import ProductRepo
from grocery.utils.logging import get_logger

logger = get_logger(__name__)

# columns that cannot be nulled by an update
_REQUIRED = {"name", "description", "unit", "price", "in_stock"}


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(self, search: str | None = None, in_stock_only: bool = False) -> list[ProductModel]:
        return self.repo.list_products(search=search, in_stock_only=in_stock_only)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, payload: ProductIn) -> ProductModel:
        product = self.repo.save(ProductModel(**payload.model_dump()))
        logger.info("product_created", product_id=product.id)
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field in _REQUIRED:
                continue
            setattr(product, field, value)
        return self.repo.save(product)

    def set_in_stock(self, product_id: int, in_stock: bool | None = None) -> ProductModel:
        """Sets availability, or flips it when ``in_stock`` is omitted."""
        product = self.get_product(product_id)
        product.in_stock = (not product.in_stock) if in_stock is None else in_stock
        saved = self.repo.save(product)
        logger.info("product_stock_changed", product_id=product_id, in_stock=saved.in_stock)
        return saved

    def delete_product(self, product_id: int) -> None:
        # order lines keep their own snapshot; cart lines for it disappear
        product = self.get_product(product_id)
        self.repo.delete(product)
        logger.info("product_deleted", product_id=product_id)

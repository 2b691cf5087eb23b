from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from grocery.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_many(self, product_ids) -> dict[int, ProductModel]:
        ids = list(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(ProductModel).where(ProductModel.id.in_(ids))).scalars()
        return {p.id: p for p in rows}

    def list_products(self, search: str | None = None, in_stock_only: bool = False) -> list[ProductModel]:
        stmt = select(ProductModel)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(ProductModel.name.ilike(pattern), ProductModel.category.ilike(pattern))
            )
        if in_stock_only:
            stmt = stmt.where(ProductModel.in_stock.is_(True))
        return list(self.db.execute(stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())).scalars())

    def save(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

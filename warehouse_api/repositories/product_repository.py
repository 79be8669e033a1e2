from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select

from warehouse_api.models.product import Product
from warehouse_api.repositories.base import Repository


class ProductRepository(Repository[Product]):
    model = Product

    def find_by_code(self, code: str) -> Optional[Product]:
        return self._first(select(Product).where(Product.code == code))

    def find_by_barcode(self, barcode: str) -> Optional[Product]:
        return self._first(select(Product).where(Product.barcode == barcode))

    def exists_by_code(self, code: str) -> bool:
        stmt = select(Product.id).where(Product.code == code).limit(1)
        return self.db.execute(stmt).first() is not None

    def find_by_category(self, category: str) -> list[Product]:
        return self._all(
            select(Product).where(Product.category == category).order_by(Product.code)
        )

    def find_by_active(self, active: bool) -> list[Product]:
        return self._all(
            select(Product).where(Product.is_active.is_(active)).order_by(Product.code)
        )

    def search(self, term: str) -> list[Product]:
        like = f"%{term.strip().lower()}%"
        stmt = (
            select(Product)
            .where(
                func.lower(Product.name).like(like)
                | func.lower(Product.description).like(like)
                | func.lower(Product.code).like(like)
            )
            .order_by(Product.code)
        )
        return self._all(stmt)

    def find_by_price_between(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        return self._all(
            select(Product).where(Product.price.between(min_price, max_price)).order_by(Product.price)
        )

    def find_all_codes(self) -> set[str]:
        return set(self.db.execute(select(Product.code)).scalars().all())

    def find_all_categories(self) -> list[str]:
        stmt = select(Product.category).distinct().order_by(Product.category)
        return list(self.db.execute(stmt).scalars().all())


__all__ = ["ProductRepository"]

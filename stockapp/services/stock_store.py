from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from stockapp.models.stock import Stock


class StockNotFoundError(LookupError):
    def __init__(self, stock_id):
        super().__init__("Stock {} not found".format(stock_id))
        self.stock_id = stock_id


class StockStore:
    """Persistence operations for :class:`Stock` rows over one session."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, stock: Stock) -> Stock:
        self.db.add(stock)
        self._commit()
        self.db.refresh(stock)
        return stock

    def find_all(self) -> list[Stock]:
        return list(self.db.execute(select(Stock).order_by(Stock.id)).scalars().all())

    def find_by_id(self, stock_id: int) -> Optional[Stock]:
        return self.db.get(Stock, stock_id)

    def save(self, stock: Stock) -> Stock:
        # Rows removed since they were loaded are reported, never re-inserted.
        if stock.id is None:
            raise StockNotFoundError(None)
        if stock not in self.db:
            if self.db.get(Stock, stock.id) is None:
                raise StockNotFoundError(stock.id)
            stock = self.db.merge(stock)
        try:
            self._commit()
        except StaleDataError as exc:
            raise StockNotFoundError(stock.id) from exc
        return stock

    def delete(self, stock: Stock) -> None:
        self.db.delete(stock)
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except (SQLAlchemyError, OverflowError):
            self.db.rollback()
            raise


__all__ = ["StockNotFoundError", "StockStore"]

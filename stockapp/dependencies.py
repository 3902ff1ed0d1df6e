from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from stockapp.services.stock_store import StockStore


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_stock_store(db: Session = Depends(get_db)) -> StockStore:
    return StockStore(db)


__all__ = ["get_db", "get_stock_store"]

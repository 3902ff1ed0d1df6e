import logging

from fastapi import APIRouter, Depends, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from stockapp.core.dates import advance_past, utcnow
from stockapp.dependencies import get_stock_store
from stockapp.models.stock import Stock
from stockapp.schemas.stock import StockCreate, StockRead, StockUpdate
from stockapp.services.stock_store import StockNotFoundError, StockStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stock", tags=["Stock"])

NOT_FOUND_MESSAGE = "Stock not found"

# Largest value an Integer primary key holds on every supported backend.
MAX_STOCK_ID = 2**31 - 1

# Drivers such as sqlite3 raise OverflowError for integers wider than the column.
_STORAGE_ERRORS = (SQLAlchemyError, OverflowError)


def _not_found() -> PlainTextResponse:
    return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)


def _load(store: StockStore, stock_id: str):
    # Only plain decimal ids within the key range can match a row.
    if not (stock_id.isascii() and stock_id.isdigit()):
        return None
    key = int(stock_id)
    if not 1 <= key <= MAX_STOCK_ID:
        return None
    return store.find_by_id(key)


@router.post("", response_model=StockRead)
def create_stock(payload: StockCreate, store: StockStore = Depends(get_stock_store)):
    now = utcnow()
    stock = Stock(**payload.model_dump(), created_at=now, updated_at=now)
    try:
        stock = store.insert(stock)
    except _STORAGE_ERRORS as exc:
        logger.error(
            "Create stock API failed",
            extra={"action": "create", "data": payload.model_dump(), "error": str(exc)},
        )
        return PlainTextResponse(str(exc), status_code=500)

    body = StockRead.model_validate(stock)
    logger.info(
        "Create stock API called",
        extra={"action": "create", "data": jsonable_encoder(body)},
    )
    return body


@router.get("", response_model=list[StockRead])
def list_stock(store: StockStore = Depends(get_stock_store)):
    stocks = store.find_all()
    logger.info("List stock API called", extra={"action": "list", "count": len(stocks)})
    return [StockRead.model_validate(stock) for stock in stocks]


@router.get("/{stock_id}", response_model=StockRead)
def get_stock_detail(stock_id: str, store: StockStore = Depends(get_stock_store)):
    stock = _load(store, stock_id)
    if stock is None:
        return _not_found()
    logger.info("Detail stock API called", extra={"action": "detail", "id": stock_id})
    return StockRead.model_validate(stock)


@router.put("/{stock_id}", response_model=StockRead)
def update_stock(
    stock_id: str,
    payload: StockUpdate,
    store: StockStore = Depends(get_stock_store),
):
    stock = _load(store, stock_id)
    if stock is None:
        return _not_found()

    for field, value in payload.changes().items():
        setattr(stock, field, value)
    stock.updated_at = advance_past(stock.updated_at)

    try:
        stock = store.save(stock)
    except StockNotFoundError:
        return _not_found()
    except _STORAGE_ERRORS as exc:
        logger.error(
            "Update stock API failed",
            extra={"action": "update", "id": stock_id, "error": str(exc)},
        )
        return PlainTextResponse(str(exc), status_code=500)

    logger.info("Update stock API called", extra={"action": "update", "id": stock_id})
    return StockRead.model_validate(stock)


@router.delete("/{stock_id}", status_code=204)
def delete_stock(stock_id: str, store: StockStore = Depends(get_stock_store)):
    stock = _load(store, stock_id)
    if stock is None:
        return _not_found()
    try:
        store.delete(stock)
    except _STORAGE_ERRORS as exc:
        logger.error(
            "Delete stock API failed",
            extra={"action": "delete", "id": stock_id, "error": str(exc)},
        )
        return PlainTextResponse(str(exc), status_code=500)
    logger.info("Delete stock API called", extra={"action": "delete", "id": stock_id})
    return Response(status_code=204)


__all__ = ["NOT_FOUND_MESSAGE", "router"]

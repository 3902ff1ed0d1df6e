from stockapp.services.stock_store import StockNotFoundError, StockStore

__all__ = ["StockNotFoundError", "StockStore"]

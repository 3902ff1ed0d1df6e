from stockapp.models.stock import Stock

__all__ = ["Stock"]

from stockapp.routers.health import router as health_router
from stockapp.routers.stock import router as stock_router

__all__ = ["health_router", "stock_router"]

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from stockapp.core.dates import ensure_utc

# Fields a client may set. id and the timestamps are server-owned.
CLIENT_FIELDS = (
    "nama_barang",
    "jumlah_stok",
    "nomor_seri",
    "additional_info",
    "gambar_barang",
    "created_by",
    "updated_by",
)


class StockBase(BaseModel):
    nama_barang: str = ""
    jumlah_stok: int = 0
    nomor_seri: str = ""
    additional_info: Any = None
    gambar_barang: str = ""
    created_by: str = ""
    updated_by: str = ""

    model_config = ConfigDict(extra="ignore")


class StockCreate(StockBase):
    pass


class StockUpdate(StockBase):
    """Partial update: only fields present in the body are applied."""

    def changes(self) -> dict[str, Any]:
        return self.model_dump(include=set(CLIENT_FIELDS), exclude_unset=True)


class StockRead(StockBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @field_validator("nama_barang", "nomor_seri", "gambar_barang", "created_by", "updated_by", mode="before")
    @classmethod
    def _null_string(cls, value):
        return "" if value is None else value

    @field_validator("jumlah_stok", mode="before")
    @classmethod
    def _null_quantity(cls, value):
        return 0 if value is None else value


__all__ = ["CLIENT_FIELDS", "StockCreate", "StockRead", "StockUpdate"]

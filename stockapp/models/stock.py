from sqlalchemy import JSON, Column, DateTime, Integer, String

from stockapp.database.base import Base


class Stock(Base):
    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True, autoincrement=True)

    nama_barang = Column(String, default="")
    jumlah_stok = Column(Integer, default=0)
    nomor_seri = Column(String, default="")
    additional_info = Column(JSON(none_as_null=True))
    gambar_barang = Column(String, default="")

    created_at = Column(DateTime(timezone=True))
    created_by = Column(String, default="")
    updated_at = Column(DateTime(timezone=True))
    updated_by = Column(String, default="")

    def __repr__(self) -> str:
        return "<Stock id={} nama_barang={!r}>".format(self.id, self.nama_barang)


__all__ = ["Stock"]

import tempfile
import unittest
from pathlib import Path

from stockapp.database import build_engine, build_session_factory, ensure_schema
from stockapp.models.stock import Stock
from stockapp.services.stock_store import StockNotFoundError, StockStore


class StockStoreTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite://")
        ensure_schema(self.engine)
        self.Session = build_session_factory(self.engine)
        self.db = self.Session()
        self.store = StockStore(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_find_all_on_empty_store(self):
        self.assertEqual(self.store.find_all(), [])

    def test_insert_and_find_by_id(self):
        stock = self.store.insert(Stock(nama_barang="Router", jumlah_stok=3, additional_info={"rev": 2}))
        self.assertIsNotNone(stock.id)

        found = self.store.find_by_id(stock.id)
        self.assertEqual(found.nama_barang, "Router")
        self.assertEqual(found.additional_info, {"rev": 2})

    def test_find_by_id_returns_none_when_missing(self):
        self.assertIsNone(self.store.find_by_id(12345))

    def test_save_overwrites_fields(self):
        stock = self.store.insert(Stock(nama_barang="Switch", jumlah_stok=10))
        stock.jumlah_stok = -2
        self.store.save(stock)

        other = self.Session()
        try:
            self.assertEqual(other.get(Stock, stock.id).jumlah_stok, -2)
        finally:
            other.close()

    def test_save_without_key_is_not_found(self):
        with self.assertRaises(StockNotFoundError):
            self.store.save(Stock(nama_barang="Ghost"))

    def test_save_detached_record_with_unknown_key_is_not_found(self):
        with self.assertRaises(StockNotFoundError):
            self.store.save(Stock(id=999, nama_barang="Ghost"))
        self.assertEqual(self.store.find_all(), [])

    def test_delete_removes_row(self):
        stock = self.store.insert(Stock(nama_barang="Kabel"))
        self.store.delete(stock)
        self.assertIsNone(self.store.find_by_id(stock.id))


class StockStoreConcurrentDeleteTest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        db_path = Path(self._tmp.name) / "stock.db"
        self.engine = build_engine("sqlite:///{}".format(db_path))
        ensure_schema(self.engine)
        self.Session = build_session_factory(self.engine)

    def tearDown(self):
        self.engine.dispose()
        self._tmp.cleanup()

    def test_save_after_concurrent_delete_is_not_found(self):
        writer = self.Session()
        stock_id = StockStore(writer).insert(Stock(nama_barang="Rak")).id
        writer.close()

        first = self.Session()
        second = self.Session()
        try:
            stock = StockStore(first).find_by_id(stock_id)
            second_store = StockStore(second)
            second_store.delete(second_store.find_by_id(stock_id))

            stock.jumlah_stok = 9
            with self.assertRaises(StockNotFoundError):
                StockStore(first).save(stock)
        finally:
            first.close()
            second.close()


if __name__ == "__main__":
    unittest.main()

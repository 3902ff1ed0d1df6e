import unittest

from sqlalchemy import inspect, text

from stockapp.database import build_engine, ensure_schema
from stockapp.models.stock import Stock


class EnsureSchemaTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite://")

    def tearDown(self):
        self.engine.dispose()

    def _columns(self):
        return {column["name"] for column in inspect(self.engine).get_columns("stocks")}

    def test_creates_table_on_empty_database(self):
        ensure_schema(self.engine)
        self.assertEqual(self._columns(), {column.name for column in Stock.__table__.columns})

    def test_adds_missing_columns_and_keeps_rows(self):
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "CREATE TABLE stocks ("
                    "id INTEGER PRIMARY KEY, nama_barang VARCHAR, jumlah_stok INTEGER, legacy_note VARCHAR)"
                )
            )
            conn.execute(
                text("INSERT INTO stocks (nama_barang, jumlah_stok, legacy_note) VALUES ('Obeng', 4, 'old')")
            )

        added = ensure_schema(self.engine)

        self.assertIn(("stocks", "additional_info"), added)
        self.assertIn(("stocks", "updated_by"), added)
        self.assertNotIn(("stocks", "nama_barang"), added)
        columns = self._columns()
        self.assertIn("legacy_note", columns)
        self.assertTrue({column.name for column in Stock.__table__.columns} <= columns)

        with self.engine.connect() as conn:
            row = conn.execute(text("SELECT nama_barang, jumlah_stok, legacy_note FROM stocks")).one()
        self.assertEqual(tuple(row), ("Obeng", 4, "old"))

    def test_compatible_schema_is_a_no_op(self):
        ensure_schema(self.engine)
        self.assertEqual(ensure_schema(self.engine), [])


if __name__ == "__main__":
    unittest.main()

"""Tests for CSV ingestion."""
import random
import unittest
from datetime import date

from rpee.geo.resolver import CoordinateResolver
from rpee.ingest.parser import parse_csv, match_columns, parse_amount


SAMPLE_CSV = (
    "id_transaccion,fecha_registro,municipio,zona_colonia,tipo_propiedad,monto_mxn,latitud,longitud,uso_suelo_sugerido\n"
    "TX-001,2024-01-15,Mérida,Temozón Norte,Casa Habitación,3500000,21.05,-89.6,Habitacional\n"
    "TX-002,2024-02-20,Hunucmá,Parque Industrial,Nave Industrial,12000000,,,Industrial\n"
    "\n"
    "TX-003,2024-03-05,Progreso,Centro,Local Comercial,abc,no-lat,-89.66,Comercial\n"
)


class TestCsvParser(unittest.TestCase):
    """Test parse_csv functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.resolver = CoordinateResolver(rng=random.Random(1))
        self.today = date(2024, 6, 30)

    def parse(self, text):
        return parse_csv(text, resolver=self.resolver, today=self.today)

    def test_example_dataset(self):
        """The reference two-row example parses amounts and municipalities."""
        text = (
            "id_transaccion,fecha_registro,municipio,monto_mxn\n"
            "1,2024-01-01,Mérida,500000\n"
            "2,2024-02-01,Progreso,750000"
        )
        result = self.parse(text)

        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.data), 2)
        self.assertEqual([t.amount for t in result.data], [500000, 750000])
        self.assertEqual([t.municipality for t in result.data], ["Mérida", "Progreso"])
        self.assertEqual([t.id for t in result.data], ["1", "2"])

    def test_record_count_skips_blank_lines(self):
        """One record per non-blank data line."""
        result = self.parse(SAMPLE_CSV)
        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.data), 3)

    def test_lat_lon_are_normalized(self):
        """Rows with valid lat/lon use the affine projection."""
        first = self.parse(SAMPLE_CSV).data[0]
        self.assertAlmostEqual(first.coordinates.y, 55.0)
        self.assertAlmostEqual(first.coordinates.x, 50.0)

    def test_missing_or_invalid_lat_lon_falls_back_to_resolver(self):
        """Empty or unparsable lat/lon resolve by municipality."""
        data = self.parse(SAMPLE_CSV).data
        hunucma, progreso = data[1], data[2]
        self.assertLessEqual(abs(hunucma.coordinates.x - 15), 5)
        self.assertLessEqual(abs(hunucma.coordinates.y - 55), 5)
        self.assertLessEqual(abs(progreso.coordinates.x - 50), 5)
        self.assertLessEqual(abs(progreso.coordinates.y - 90), 5)

    def test_unparsable_amount_defaults_to_zero(self):
        """Bad amounts become 0 and the row is kept."""
        self.assertEqual(self.parse(SAMPLE_CSV).data[2].amount, 0)

    def test_optional_columns_default(self):
        """Absent optional columns take their defaults."""
        result = self.parse("municipio,monto\nUmán,100\nKanasín,200\n")

        first = result.data[0]
        self.assertEqual(first.id, "csv-0")
        self.assertEqual(result.data[1].id, "csv-1")
        self.assertEqual(first.date, "2024-06-30")
        self.assertEqual(first.zone, "General")
        self.assertEqual(first.type, "Desconocido")

    def test_short_rows_and_empty_cells_default(self):
        """Missing trailing cells and empty cells never leave a field empty."""
        result = self.parse("id,fecha,municipio,zona,tipo,monto\n,,,,\n")
        txn = result.data[0]

        self.assertEqual(txn.id, "csv-0")
        self.assertEqual(txn.date, "2024-06-30")
        self.assertEqual(txn.municipality, "Desconocido")
        self.assertEqual(txn.zone, "General")
        self.assertEqual(txn.type, "Desconocido")
        self.assertEqual(txn.amount, 0)

    def test_english_headers(self):
        """English header names bind through the same rules."""
        result = self.parse("ID,Date,Municipality,Zone,Type,Amount\nA1,2024-05-01,Motul,Centro,Terreno,42.5\n")
        txn = result.data[0]

        self.assertEqual(txn.id, "A1")
        self.assertEqual(txn.date, "2024-05-01")
        self.assertEqual(txn.municipality, "Motul")
        self.assertEqual(txn.zone, "Centro")
        self.assertEqual(txn.type, "Terreno")
        self.assertEqual(txn.amount, 42.5)

    def test_crlf_line_endings(self):
        """Windows line endings are trimmed from cells."""
        result = self.parse("municipio,monto\r\nMérida,10\r\n")
        self.assertEqual(result.data[0].amount, 10)
        self.assertEqual(result.data[0].municipality, "Mérida")

    def test_empty_input_fails(self):
        """Empty text is rejected."""
        result = self.parse("")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "EmptyOrHeaderOnly")
        self.assertTrue(result.error)

    def test_header_only_fails(self):
        """A header without data lines is rejected."""
        result = self.parse("municipio,monto\n\n   \n")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "EmptyOrHeaderOnly")

    def test_missing_amount_column_fails(self):
        """The amount column is required."""
        result = self.parse("municipio,zona\nMérida,Centro\n")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "MissingRequiredColumns")

    def test_missing_municipality_column_fails(self):
        """The municipality column is required."""
        result = self.parse("zona,monto\nCentro,100\n")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "MissingRequiredColumns")
        self.assertIn("municipio", result.error)

    def test_unexpected_error_becomes_csv_format_error(self):
        """Non-text input is reported, not raised."""
        result = parse_csv(None)
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "CsvFormatError")


class TestCsvHelpers(unittest.TestCase):
    """Test header matching and amount parsing."""

    def test_match_columns_uses_first_matching_column(self):
        """Each field binds to the first header containing a keyword."""
        headers = ["id_transaccion", "fecha_registro", "municipio", "zona_colonia",
                   "tipo_propiedad", "monto_mxn", "latitud", "longitud", "uso_suelo_sugerido"]
        self.assertEqual(match_columns(headers), {
            "id": 0,
            "date": 1,
            "municipality": 2,
            "zone": 3,
            "type": 4,
            "amount": 5,
            "latitude": 6,
            "longitude": 7,
        })

    def test_match_columns_is_case_insensitive(self):
        """Header case does not matter."""
        columns = match_columns(["MUNICIPIO", " Monto_MXN "])
        self.assertEqual(columns, {"municipality": 0, "amount": 1})

    def test_parse_amount(self):
        """Amounts accept numeric prefixes and reject negatives."""
        self.assertEqual(parse_amount("1500.5"), 1500.5)
        self.assertEqual(parse_amount("2500000 MXN"), 2500000)
        self.assertEqual(parse_amount(""), 0)
        self.assertEqual(parse_amount("n/a"), 0)
        self.assertEqual(parse_amount("-10"), 0)
        self.assertEqual(parse_amount("nan"), 0)
        self.assertEqual(parse_amount(None), 0)


if __name__ == "__main__":
    unittest.main()

import unittest

from carmarket import booking
from carmarket.exceptions import ValidationError
from carmarket.models import test_drive
from carmarket.services.ai import AIServiceError, extract_year, parse_analysis

Status = test_drive.TestDriveStatus


class TestTransitions(unittest.TestCase):

    def test_allowed_edges(self):
        allowed = {
            (Status.BOOKED, Status.CONFIRMED),
            (Status.BOOKED, Status.CANCELED),
            (Status.CONFIRMED, Status.COMPLETED),
            (Status.CONFIRMED, Status.CANCELED),
        }
        for current in Status:
            for new in Status:
                self.assertEqual(
                    booking.can_transition(current, new),
                    (current, new) in allowed,
                    f"{current.value} -> {new.value}",
                )

    def test_terminal_statuses(self):
        self.assertTrue(booking.is_terminal(Status.COMPLETED))
        self.assertTrue(booking.is_terminal(Status.CANCELED))
        self.assertFalse(booking.is_terminal(Status.BOOKED))
        self.assertFalse(booking.is_terminal(Status.CONFIRMED))

    def test_parse_status(self):
        self.assertEqual(booking.parse_status("confirmed"), Status.CONFIRMED)
        self.assertEqual(booking.parse_status("canceled"), Status.CANCELED)
        for value in ("booked", "cancelled", "Confirmed", ""):
            with self.assertRaises(ValidationError):
                booking.parse_status(value)


class TestImageAnalysisParsing(unittest.TestCase):

    def test_plain_json(self):
        analysis = parse_analysis('{"make": "Toyota", "model": "Camry", "year": "2018", "color": "Blue"}')
        self.assertEqual(analysis.make, "Toyota")
        self.assertEqual(analysis.model, "Camry")
        self.assertEqual(analysis.year, 2018)
        self.assertEqual(analysis.color, "Blue")

    def test_fenced_json(self):
        raw = '```json\n{"make": "BMW", "model": "X5", "year": 2020}\n```'
        analysis = parse_analysis(raw)
        self.assertEqual(analysis.make, "BMW")
        self.assertEqual(analysis.year, 2020)

    def test_json_inside_prose(self):
        analysis = parse_analysis('Here you go: {"make": "Kia"} Hope it helps.')
        self.assertEqual(analysis.make, "Kia")

    def test_unknown_values_become_none(self):
        analysis = parse_analysis('{"make": "Ford", "model": "Unknown", "year": "unknown", "color": ""}')
        self.assertEqual(analysis.make, "Ford")
        self.assertIsNone(analysis.model)
        self.assertIsNone(analysis.year)
        self.assertIsNone(analysis.color)

    def test_year_extraction(self):
        self.assertEqual(extract_year("circa 2015-2017"), 2015)
        self.assertEqual(extract_year(2021), 2021)
        self.assertIsNone(extract_year("late nineties"))
        self.assertIsNone(extract_year("123456"))
        self.assertIsNone(extract_year(None))

    def test_unparseable_reply(self):
        for raw in ("not json at all", "[1, 2, 3]", ""):
            with self.assertRaises(AIServiceError):
                parse_analysis(raw)

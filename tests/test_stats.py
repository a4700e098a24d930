import unittest
from unittest.mock import patch, Mock
from fastapi.testclient import TestClient
from app import app
from auth import RequestContext, require_student


class TestStatsEndpoint(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        app.dependency_overrides[require_student] = lambda: RequestContext(
            user_id=1, username="amy"
        )

    def tearDown(self):
        app.dependency_overrides = {}

    @patch("services.stats_service.get_detections_for_user")
    def test_stats_empty(self, mock_rows):
        mock_rows.return_value = []

        response = self.client.get("/stats")
        self.assertEqual(response.status_code, 200)
        stats = response.json()
        self.assertEqual(stats["total_detections"], 0)
        self.assertEqual(stats["compliance_rate"], 0.0)
        self.assertEqual(stats["average_confidence"], 0.0)
        self.assertEqual(stats["label_counts"], {})

    @patch("services.stats_service.get_detections_for_user")
    def test_stats_with_history(self, mock_rows):
        mock_rows.return_value = [
            Mock(confidence=0.9, label="1st year", is_compliant=True),
            Mock(confidence=0.6, label="without uniform and id", is_compliant=False),
            Mock(confidence=0.9, label="1st year", is_compliant=True),
        ]

        response = self.client.get("/stats")
        self.assertEqual(response.status_code, 200)
        stats = response.json()

        self.assertEqual(stats["total_detections"], 3)
        self.assertEqual(stats["compliant_count"], 2)
        self.assertAlmostEqual(stats["compliance_rate"], 2 / 3, places=4)
        self.assertAlmostEqual(stats["average_confidence"], 0.8, places=4)
        self.assertEqual(
            stats["label_counts"], {"1st year": 2, "without uniform and id": 1}
        )

    def test_stats_requires_login(self):
        app.dependency_overrides = {}
        response = self.client.get("/stats", follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/login")


def test_stats_totals_match_stored_rows(db):
    from models import Detection, User
    from services.stats_service import get_stats_service

    amy = User(username="amy", password="x", role="student")
    db.add(amy)
    db.commit()
    for label, compliant in [("1st year", True), ("3rd year", True),
                             ("without uniform and id", False)]:
        db.add(Detection(user_id=amy.id, username="amy", label=label,
                         confidence=0.5, is_compliant=compliant))
    db.commit()

    stats = get_stats_service(amy.id, db)

    assert stats["total_detections"] == 3
    assert stats["compliant_count"] == 2
    assert stats["compliance_rate"] == round(2 / 3, 4)
    assert sum(stats["label_counts"].values()) == stats["total_detections"]

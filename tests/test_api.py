from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from stockvoice.config import Settings
from stockvoice.main import app
from stockvoice.services.catalog_store import reset_catalog_cache

CATALOG = [
    {"id": "avocado", "name": "Avocado"},
    {"id": "red-onion", "name": "Red Onion"},
    {"id": "green-onion", "name": "Green Onion", "synonyms": "scallion; spring onion"},
    {"id": "cucumber", "name": "Cucumber"},
    {"id": "tofu", "name": "Tofu"},
]


class SpeechApiTest(unittest.TestCase):
    def setUp(self):
        reset_catalog_cache()
        self.client = TestClient(app)

    def tearDown(self):
        reset_catalog_cache()

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertIn("catalogAvailable", body)
        self.assertEqual(body["defaultLowThreshold"], 5)

    def test_parse_with_inline_catalog_and_overrides(self):
        response = self.client.post(
            "/v1/speech/parse",
            json={
                "text": "ten avocado, three red onion, out of cucumber, 2 scallions, 4 widgets",
                "catalog": CATALOG,
                "overrides": {"avocado": {"lowThreshold": 12}},
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            body["lines"],
            [
                {"itemId": "avocado", "qty": 10, "flag": "low"},
                {"itemId": "red-onion", "qty": 3, "flag": "low"},
                {"itemId": "cucumber", "qty": 0, "flag": "out"},
                {"itemId": "green-onion", "qty": 2, "flag": "low"},
            ],
        )
        self.assertEqual(body["analysis"]["unrecognizedParts"], ["widgets"])
        self.assertIn("10 Avocado", body["analysis"]["parsedItems"])

    def test_parse_empty_text(self):
        response = self.client.post("/v1/speech/parse", json={"text": "  ", "catalog": CATALOG})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["lines"], [])

    def test_parse_uses_default_threshold_override(self):
        response = self.client.post(
            "/v1/speech/parse",
            json={"text": "8 tofu", "catalog": CATALOG, "defaultLowThreshold": 10},
        )
        self.assertEqual(response.json()["lines"], [{"itemId": "tofu", "qty": 8, "flag": "low"}])

    def test_parse_uses_configured_catalog(self):
        with tempfile.TemporaryDirectory() as tmp:
            catalog_path = Path(tmp) / "catalog.json"
            catalog_path.write_text(json.dumps({"items": CATALOG}), encoding="utf-8")
            overrides_path = Path(tmp) / "overrides.json"
            overrides_path.write_text(json.dumps({"tofu": {"lowThreshold": 1}}), encoding="utf-8")
            settings = Settings(catalog_path=str(catalog_path), overrides_path=str(overrides_path))
            with mock.patch("stockvoice.routes.speech.get_settings", return_value=settings):
                response = self.client.post("/v1/speech/parse", json={"text": "six tofu"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["lines"], [{"itemId": "tofu", "qty": 6, "flag": "ok"}])

    def test_parse_without_catalog_returns_503(self):
        with tempfile.TemporaryDirectory() as tmp:
            settings = Settings(catalog_path=str(Path(tmp) / "missing.json"))
            with mock.patch("stockvoice.routes.speech.get_settings", return_value=settings):
                response = self.client.post("/v1/speech/parse", json={"text": "six tofu"})
        self.assertEqual(response.status_code, 503)

    def test_invalid_catalog_item_is_rejected(self):
        response = self.client.post(
            "/v1/speech/parse",
            json={"text": "six tofu", "catalog": [{"name": "No id"}]},
        )
        self.assertEqual(response.status_code, 422)

    def test_classify(self):
        cases = [
            ({"qty": 0, "lowThreshold": 3}, "out"),
            ({"qty": 5}, "low"),
            ({"qty": 6}, "ok"),
            ({"qty": 6, "lowThreshold": 10}, "low"),
        ]
        for payload, expected in cases:
            response = self.client.post("/v1/flags/classify", json=payload)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json(), {"flag": expected}, payload)

    def test_classify_rejects_non_finite_numbers(self):
        for body in ('{"qty": NaN}', '{"qty": 1, "lowThreshold": Infinity}'):
            response = self.client.post(
                "/v1/flags/classify",
                content=body,
                headers={"Content-Type": "application/json"},
            )
            self.assertEqual(response.status_code, 422, body)

    def test_request_id_header(self):
        response = self.client.get("/v1/health", headers={"X-Request-ID": "abc123"})
        self.assertEqual(response.headers["X-Request-ID"], "abc123")


if __name__ == "__main__":
    unittest.main()

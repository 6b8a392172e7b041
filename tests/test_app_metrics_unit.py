# User value: This test checks that request metrics stay bounded and are scrapeable by Prometheus.
import os
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from utils import metrics

with patch.dict(os.environ, {"RELAY_MODE": "raw"}, clear=True):
    from app import app


def _requests_total(path: str, status_code: int) -> float:
    value = metrics.sample_value(
        "api_http_requests_total",
        method="GET",
        path=path,
        status_class=f"{status_code // 100}xx",
        status_code=status_code,
    )
    return value or 0


class AppMetricsUnitTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    # User value: scanning random URLs cannot grow the metrics store.
    def test_unknown_paths_share_one_label(self):
        before = _requests_total(metrics.UNMATCHED_ROUTE, 404)
        for i in range(20):
            self.assertEqual(self.client.get(f"/nope/{i}").status_code, 404)

        self.assertEqual(_requests_total(metrics.UNMATCHED_ROUTE, 404), before + 20)
        self.assertIsNone(metrics.sample_value(
            "api_http_requests_total", method="GET", path="/nope/7", status_class="4xx", status_code=404
        ))

    def test_matched_route_labelled_by_template(self):
        before = _requests_total("/health", 200)
        self.assertEqual(self.client.get("/health").status_code, 200)
        self.assertEqual(_requests_total("/health", 200), before + 1)

    def test_metrics_endpoint_serves_prometheus_text(self):
        self.client.get("/health")
        resp = self.client.get("/metrics/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("api_http_requests_total", resp.text)
        self.assertIn('path="/health"', resp.text)


if __name__ == "__main__":
    unittest.main()

import unittest
from unittest.mock import patch

from prometheus_client import CollectorRegistry

from warehouse_api.services import AuditService, MetricsService


class AuditServiceTest(unittest.TestCase):
    def setUp(self):
        self.audit = AuditService(logger_name="AUDIT.test", slow_threshold_ms=5000)

    def test_action_line(self):
        with self.assertLogs("AUDIT.test", level="INFO") as logs:
            self.audit.log_action("CREATE_PRODUCT", "alice", "code=SKU-1", entity_id=4)
        line = logs.output[0]
        self.assertIn("ACTION: CREATE_PRODUCT", line)
        self.assertIn("USER: alice", line)
        self.assertIn("ENTITY_ID: 4", line)

    def test_slow_operation_logged_as_warning(self):
        with self.assertLogs("AUDIT.test", level="INFO") as logs:
            self.audit.log_performance_metric("REPORT", 120)
            self.audit.log_performance_metric("REPORT", 5001)
        self.assertTrue(logs.output[0].startswith("INFO"))
        self.assertTrue(logs.output[1].startswith("WARNING"))
        self.assertIn("SLOW_OPERATION", logs.output[1])

    def test_error_and_data_change(self):
        with self.assertLogs("AUDIT.test", level="INFO") as logs:
            self.audit.log_error("CREATE_TRANSACTION", "bob", "failed", ValueError("bad input"))
            self.audit.log_data_change(
                "InventoryItem", 1, "UPDATE", "bob", {"quantity": 1}, {"quantity": 2}
            )
            self.audit.log_security_event("AUTHENTICATION_FAILED", "anonymous", "10.0.0.1")
        self.assertIn("EXCEPTION: ValueError", logs.output[0])
        self.assertIn("OLD: {quantity=1}", logs.output[1])
        self.assertIn("IP: 10.0.0.1", logs.output[2])

    def test_sink_failure_does_not_propagate(self):
        with patch.object(self.audit.audit_logger, "info", side_effect=OSError("disk full")):
            self.audit.log_action("X", "alice", "details")


class MetricsServiceTest(unittest.TestCase):
    def setUp(self):
        self.registry = CollectorRegistry()
        self.metrics = MetricsService(self.registry)

    def test_counters_are_labelled(self):
        self.metrics.record_transaction("ISSUE")
        self.metrics.record_transaction("ISSUE")
        self.metrics.record_inventory_update(1, 2)
        self.metrics.record_api_request("/health", "GET", 200)

        sample = self.registry.get_sample_value
        self.assertEqual(sample("warehouse_transactions_total", {"type": "ISSUE"}), 2.0)
        self.assertEqual(
            sample("warehouse_inventory_updates_total", {"warehouse_id": "1", "product_id": "2"}),
            1.0,
        )
        self.assertEqual(
            sample(
                "warehouse_api_requests_total",
                {"endpoint": "/health", "method": "GET", "status": "200"},
            ),
            1.0,
        )

    def test_gauges_and_timer(self):
        self.metrics.update_inventory_level(3, 42)
        self.metrics.record_inventory_check(3)
        with self.metrics.time_operation("report"):
            pass

        sample = self.registry.get_sample_value
        self.assertEqual(sample("warehouse_inventory_level", {"warehouse_id": "3"}), 42.0)
        self.assertGreater(
            sample("warehouse_inventory_last_check_timestamp_seconds", {"warehouse_id": "3"}), 0
        )
        self.assertEqual(
            sample("warehouse_operation_duration_seconds_count", {"operation": "report"}), 1.0
        )

    def test_registries_are_isolated(self):
        other = MetricsService(CollectorRegistry())
        other.record_error("ValueError", "op")
        self.assertIsNone(
            self.registry.get_sample_value(
                "warehouse_errors_total", {"error_type": "ValueError", "operation": "op"}
            )
        )

    def test_recording_failure_is_swallowed(self):
        self.metrics.update_inventory_level(1, "not a number")


if __name__ == "__main__":
    unittest.main()

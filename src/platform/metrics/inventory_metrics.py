from prometheus_client import Counter, Histogram


class InventoryMetrics:
    """
    Inventory & Booking Core Metrics Collector

    Ledger outcomes, booking/archival results and best-effort side-channel failures.
    """

    def __init__(self):
        # ========== Inventory Ledger ==========
        self.ledger_operations = Counter(
            'inventory_ledger_operations_total',
            'Ledger operations by outcome',
            ['operation', 'result'],  # operation: reserve/release/transition
        )

        self.ledger_operation_duration = Histogram(
            'inventory_ledger_operation_duration_seconds',
            'Ledger operation duration including retries',
            ['operation'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
        )

        self.ledger_retries = Counter(
            'inventory_ledger_retries_total',
            'Retries caused by transient storage conflicts',
            ['operation'],
        )

        self.release_anomalies = Counter(
            'inventory_release_anomalies_total',
            'Releases clamped because they exceeded the sold count',
        )

        # ========== Booking Registry ==========
        self.bookings = Counter(
            'booking_requests_total',
            'Booking requests by kind and result',
            ['kind', 'result'],
        )

        self.reconciliation_flags = Counter(
            'booking_reconciliation_flags_total',
            'Inventory mismatches flagged for reconciliation',
            ['reason'],
        )

        # ========== Archival Manager ==========
        self.archive_operations = Counter(
            'archive_operations_total',
            'Archive and restore operations by result',
            ['operation', 'result'],  # operation: archive/restore
        )

        # ========== Notification side channel ==========
        self.notifications = Counter(
            'notification_dispatch_total',
            'Notification dispatch outcomes',
            ['template_kind', 'result'],  # result: queued/dropped/sent/failed
        )

    # ========== Helper Methods ==========

    def record_ledger_operation(self, *, operation: str, result: str, duration: float) -> None:
        self.ledger_operations.labels(operation=operation, result=result).inc()
        self.ledger_operation_duration.labels(operation=operation).observe(duration)

    def record_booking(self, *, kind: str, result: str) -> None:
        self.bookings.labels(kind=kind, result=result).inc()

    def record_archive(self, *, operation: str, result: str) -> None:
        self.archive_operations.labels(operation=operation, result=result).inc()

    def record_notification(self, *, template_kind: str, result: str) -> None:
        self.notifications.labels(template_kind=template_kind, result=result).inc()


# Global metrics instance
metrics = InventoryMetrics()

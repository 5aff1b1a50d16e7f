from prometheus_client import Counter, Gauge, Histogram


class BackofficeMetrics:
    """
    Back office business metrics

    Tracks ledger, issuance and scan outcomes plus the background
    notification queue.
    """

    def __init__(self):
        # ========== Payment Ledger ==========
        self.payment_operations = Counter(
            'backoffice_payment_operations_total',
            'Payment add/delete operations',
            ['operation', 'result'],  # operation: add/delete, result: success/<error kind>
        )

        self.payment_amount = Counter(
            'backoffice_payment_amount_total',
            'Sum of payment amounts applied, smallest currency unit',
            ['method'],
        )

        # ========== Ticket Issuance ==========
        self.tickets_issued = Counter(
            'backoffice_tickets_issued_total', 'Tickets issued', ['template']
        )

        self.ticket_number_collisions = Counter(
            'backoffice_ticket_number_collisions_total',
            'Ticket number unique constraint collisions retried',
        )

        self.artifact_render_duration = Histogram(
            'backoffice_artifact_render_duration_seconds',
            'QR + PDF rendering time',
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
        )

        self.artifact_render_failures = Counter(
            'backoffice_artifact_render_failures_total', 'Artifact rendering failures'
        )

        # ========== Scan ==========
        self.scan_attempts = Counter(
            'backoffice_scan_attempts_total',
            'Decode and validation attempts',
            ['stage', 'result'],  # stage: decode/validate
        )

        # ========== Notifications ==========
        self.notifications = Counter(
            'backoffice_notifications_total',
            'Background notification jobs',
            ['name', 'result'],  # result: sent/retried/failed/dropped
        )

        self.notification_queue_depth = Gauge(
            'backoffice_notification_queue_depth', 'Queued notification jobs'
        )

    # ========== Helper Methods ==========

    def record_payment_operation(self, *, operation: str, result: str) -> None:
        self.payment_operations.labels(operation=operation, result=result).inc()

    def record_payment_amount(self, *, method: str, amount: int) -> None:
        self.payment_amount.labels(method=method).inc(amount)

    def record_ticket_issued(self, *, template: str) -> None:
        self.tickets_issued.labels(template=template).inc()

    def record_scan(self, *, stage: str, result: str) -> None:
        self.scan_attempts.labels(stage=stage, result=result).inc()

    def record_notification(self, *, name: str, result: str) -> None:
        self.notifications.labels(name=name, result=result).inc()


# Global metrics instance
metrics = BackofficeMetrics()

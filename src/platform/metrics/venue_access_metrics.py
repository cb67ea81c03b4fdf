from prometheus_client import Counter, Gauge, Histogram


class VenueAccessMetrics:
    """
    Business metrics for ticketing, door check-in and POS spend rules.

    Labels stay low-cardinality (venue_id, outcome). Never label by user or ticket.
    """

    def __init__(self) -> None:
        # ========== Inventory / Tickets ==========
        self.reservation_attempts = Counter(
            'ticket_reservation_attempts_total',
            'Reservation attempts by outcome',
            ['outcome'],  # reserved / sold_out / window_closed
        )
        self.reservation_releases = Counter(
            'ticket_reservation_releases_total',
            'Reservations returned to inventory',
            ['reason'],  # payment_failed / expired
        )
        self.tickets_issued = Counter('tickets_issued_total', 'Tickets issued', ['event_id'])

        # ========== Door ==========
        self.check_ins = Counter(
            'venue_check_ins_total',
            'Check-in attempts by method and outcome',
            ['venue_id', 'method', 'outcome'],
        )
        self.check_in_duration = Histogram(
            'venue_check_in_duration_seconds',
            'Time spent validating and redeeming at the door',
            ['method'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
        )
        self.no_shows_reconciled = Counter(
            'guest_list_no_shows_total', 'Guest list entries marked no-show', ['venue_id']
        )

        # ========== POS ==========
        self.pos_transactions_ingested = Counter(
            'pos_transactions_ingested_total',
            'POS transactions by ingest outcome',
            ['provider', 'outcome'],  # stored / deduplicated / malformed
        )
        self.pos_sync_duration = Histogram(
            'pos_sync_duration_seconds',
            'POS polling sync duration',
            ['provider'],
            buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
        )
        self.pos_sync_failures = Counter(
            'pos_sync_failures_total', 'POS syncs that left the cursor untouched', ['provider']
        )
        self.pos_last_sync_timestamp = Gauge(
            'pos_last_sync_timestamp_seconds',
            'Cursor position of the last successful sync',
            ['venue_id', 'provider'],
        )

        # ========== Spend rules ==========
        self.access_grants_created = Counter(
            'access_grants_created_total', 'Access grants created', ['tier', 'source']
        )
        self.spend_rule_evaluation_failures = Counter(
            'spend_rule_evaluation_failures_total',
            'Stored transactions whose spend rule evaluation raised',
            ['provider'],
        )


metrics = VenueAccessMetrics()

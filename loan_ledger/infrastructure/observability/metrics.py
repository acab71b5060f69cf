"""Prometheus metrics for enrichment outcomes, sync volume and request latency"""

from prometheus_client import Counter, Histogram

from loan_ledger.domain.models import BatchResult

# Enrichment metrics
enrichment_counter = Counter(
    "loan_ledger_enrichment_total",
    "Records enriched on read",
    ["entity", "outcome"],  # loan | deposit, computed | fallback
)

# Sync metrics
synced_records_counter = Counter(
    "loan_ledger_synced_records_total",
    "Records uploaded through sync endpoints",
    ["entity", "action"],  # created | updated
)

restored_records_counter = Counter(
    "loan_ledger_restored_records_total",
    "Records written by backup restore",
    ["entity"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_enrichment(entity: str, batch: BatchResult) -> None:
    """Record computed vs fallback counts for an enriched batch"""
    fallbacks = batch.fallback_count
    computed = len(batch) - fallbacks

    if computed:
        enrichment_counter.labels(entity=entity, outcome="computed").inc(computed)
    if fallbacks:
        enrichment_counter.labels(entity=entity, outcome="fallback").inc(fallbacks)


def record_sync(entity: str, created: int, updated: int) -> None:
    synced_records_counter.labels(entity=entity, action="created").inc(created)
    synced_records_counter.labels(entity=entity, action="updated").inc(updated)

from prometheus_client import Counter, Histogram

snapshot_requests_counter = Counter(
    "dashboard_snapshot_requests_total",
    "Dashboard snapshot requests by database and outcome",
    ["database", "outcome"],
)
snapshot_latency = Histogram(
    "dashboard_snapshot_latency_seconds",
    "Time spent aggregating one dashboard snapshot",
    ["database"],
)

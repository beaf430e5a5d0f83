from prometheus_client import Counter, Histogram

# outcome 取值为 "ok" 或语义错误类型（如 ObjectNotFound），保持低基数
OPERATIONS = Counter(
    "gateway_operations_total",
    "Total backend calls issued by the gateway",
    ["operation", "outcome"],
)

LATENCY = Histogram(
    "gateway_operation_duration_seconds",
    "Backend call latency in seconds",
    ["operation"],
)


def record_operation(operation: str, outcome: str, elapsed: float) -> None:
    OPERATIONS.labels(operation, outcome).inc()
    LATENCY.labels(operation).observe(elapsed)

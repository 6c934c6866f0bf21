from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from fastapi import Response


completion_requests = Counter(
    "completion_requests_total",
    "Total completion requests sent to the remote API",
    ["kind", "outcome"],
)

completion_latency = Histogram(
    "completion_latency_seconds",
    "Round-trip time of a single completion request",
    ["kind"],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

llm_tokens = Counter(
    "llm_tokens_total",
    "Total LLM tokens reported by the remote API",
    ["direction"],
)


def metrics_response() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )

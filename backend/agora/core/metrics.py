"""Prometheus counters and gauges for the real-time messaging core."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

REGISTRY = CollectorRegistry(auto_describe=True)

# Authenticated sockets currently attached to the hub.
REALTIME_CONNECTIONS = Gauge(
    "agora_realtime_connections",
    "Authenticated real-time connections currently open",
    registry=REGISTRY,
)

# Handshakes refused by the gatekeeper, by error code.
REALTIME_HANDSHAKE_REJECTED_TOTAL = Counter(
    "agora_realtime_handshake_rejected_total",
    "Real-time connections rejected before admission",
    ["reason"],
    registry=REGISTRY,
)

# Messages persisted through the socket path.
MESSAGES_PERSISTED_TOTAL = Counter(
    "agora_messages_persisted_total",
    "Messages persisted by kind",
    ["kind"],
    registry=REGISTRY,
)

# Per-event failures reported back as messageError.
MESSAGE_ERRORS_TOTAL = Counter(
    "agora_message_errors_total",
    "Real-time events rejected with messageError",
    ["code"],
    registry=REGISTRY,
)

READ_RECEIPTS_TOTAL = Counter(
    "agora_read_receipts_total",
    "markAsRead outcomes",
    ["outcome"],
    registry=REGISTRY,
)

# Service-layer latency, recorded by BaseService.measure_operation.
SERVICE_OPERATION_SECONDS = Histogram(
    "agora_service_operation_duration_seconds",
    "Service operation duration",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

"""Environment-driven settings for the order listener."""

import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SERVICE_NAME = "order-listener"

KAFKA_BOOTSTRAP_SERVERS = os.getenv("KAFKA_BOOTSTRAP_SERVERS", "kafka:9092")
KAFKA_CONSUMER_GROUP = os.getenv("KAFKA_CONSUMER_GROUP", "order-listener")
ORDER_CREATED_TOPIC = os.getenv("ORDER_CREATED_TOPIC", "orders.created")
AUTO_OFFSET_RESET = os.getenv("AUTO_OFFSET_RESET", "earliest")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None
LOG_SERIALIZE = _env_flag("LOG_SERIALIZE")

# Version of the wire -> canonical field table; see mapping.MAPPING_TABLES
FIELD_MAPPING_VERSION = int(os.getenv("FIELD_MAPPING_VERSION", "1"))
# Reject payload keys the mapping table does not know unless enabled
ALLOW_EXTRA_FIELDS = _env_flag("ALLOW_EXTRA_FIELDS")

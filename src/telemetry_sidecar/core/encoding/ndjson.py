"""NDJSON encoders for log entries and metric samples."""

import json
from collections.abc import Mapping

from telemetry_sidecar.core.models import LogEntry, MetricSample


def encode_log(entry: LogEntry, fields: Mapping[str, str] | None = None) -> str:
    """Encode one log entry as a newline-terminated JSON line.

    Args:
        entry: The entry to encode.
        fields: Static fields merged under the entry's own attributes.

    Returns:
        A single JSON object followed by a newline.
    """
    obj = {
        "timestamp": entry.timestamp,
        "level": entry.level,
        "message": entry.message,
        "attributes": {**(fields or {}), **entry.attributes},
    }
    return json.dumps(obj) + "\n"


def encode_metric(
    sample: MetricSample,
    dimensions: Mapping[str, str] | None = None,
    extra: Mapping[str, str] | None = None,
) -> str:
    """Encode one metric sample as a newline-terminated JSON line.

    Args:
        sample: The sample to encode.
        dimensions: Static dimensions merged under the sample's own labels.
        extra: Top-level fields such as account and namespace.

    Returns:
        A single JSON object followed by a newline.
    """
    obj = {
        **(extra or {}),
        "name": sample.name,
        "timestamp": sample.timestamp,
        "value": sample.value,
        "labels": {**(dimensions or {}), **sample.labels},
    }
    return json.dumps(obj) + "\n"

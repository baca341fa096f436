# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""JSON output formatter."""

from __future__ import annotations

import json

from skscan.models.scan import ScanResult


def format_json(result: ScanResult) -> str:
    """Return scan result as formatted camelCase JSON.

    Field order is fixed by the model, so equal results serialize to equal bytes.
    """
    return result.to_json(indent=2)


def format_json_summary(result: ScanResult) -> str:
    """Return a compact JSON summary (no findings detail)."""
    data = {
        "status": result.status,
        "summary": result.summary.model_dump(by_alias=True),
        "categories": result.categories.model_dump(mode="json", by_alias=True),
        "scannedFiles": result.scanned_files,
        "scanDuration": result.scan_duration,
        "engineVersion": result.engine_version,
    }
    return json.dumps(data, indent=2)

# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shields-style SVG status badge."""

from __future__ import annotations

from skscan.core.constants import ScanStatus

BADGE_COLORS = {
    ScanStatus.PASS: "#4c1",
    ScanStatus.WARN: "#dfb317",
    ScanStatus.FAIL: "#e05d44",
}

_LABEL_WIDTH = 52
_VALUE_WIDTH = 40


def format_badge(status: ScanStatus) -> str:
    """Return a static SVG badge showing the overall scan status."""
    color = BADGE_COLORS[status]
    total = _LABEL_WIDTH + _VALUE_WIDTH
    label_x = _LABEL_WIDTH / 2
    value_x = _LABEL_WIDTH + _VALUE_WIDTH / 2
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{total}" height="20" '
        f'role="img" aria-label="skscan: {status}">\n'
        f"  <title>skscan: {status}</title>\n"
        f'  <clipPath id="r"><rect width="{total}" height="20" rx="3" fill="#fff"/></clipPath>\n'
        f'  <g clip-path="url(#r)">\n'
        f'    <rect width="{_LABEL_WIDTH}" height="20" fill="#555"/>\n'
        f'    <rect x="{_LABEL_WIDTH}" width="{_VALUE_WIDTH}" height="20" fill="{color}"/>\n'
        f"  </g>\n"
        f'  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" font-size="11">\n'
        f'    <text x="{label_x:g}" y="14">skscan</text>\n'
        f'    <text x="{value_x:g}" y="14">{status}</text>\n'
        f"  </g>\n"
        f"</svg>\n"
    )

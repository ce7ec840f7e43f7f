"""
timing_parsers.py

Convert the interval strings published by the live feed into milliseconds.
Anything that cannot be expressed as a time (empty, lap counts) becomes 0.
"""

import logging
log = logging.getLogger(__name__)


def parse_gap(gap: str) -> int:
    """'+0.273' -> 273. '', 'LAP 1', '1L' and '20L' -> 0."""
    if not gap:
        log.debug("gap empty")
        return 0
    if "L" in gap:
        log.debug(f"gap contains L: {gap!r}")
        return 0
    try:
        return int(round(float(gap.replace("+", "")) * 1000.0))
    except ValueError:
        log.debug(f"gap failed to parse: {gap!r}")
        return 0

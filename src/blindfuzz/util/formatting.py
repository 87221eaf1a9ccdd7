"""
Formatting helpers for log lines and the findings report.

Durations and memory sizes are scaled to the largest unit that keeps the
value readable; payloads are rendered on one line with control
characters escaped.
"""

# (divisor, suffix), smallest unit first
TIME_UNITS = ((0.001, "ms"), (1.0, "s"), (60.0, "m"), (3600.0, "h"))
MEMORY_UNITS = ((1, "B"), (1024, "KB"), (1024**2, "MB"), (1024**3, "GB"))


def _scaled(value, units):
    divisor, suffix = units[0]
    for unit_divisor, unit_suffix in units[1:]:
        if value < unit_divisor:
            break
        divisor, suffix = unit_divisor, unit_suffix
    return "%5.4g %s" % (value / divisor, suffix)


def elapsedTime(t):
    """Seconds as e.g. "   50 ms", "  4.5 s" or "2.092 m"."""
    return _scaled(float(t), TIME_UNITS)


def memorySize(sz):
    """Bytes as e.g. "  512 B" or "  1.5 MB"."""
    return _scaled(float(sz), MEMORY_UNITS)


def escapePayload(payload, limit=None):
    """
    Render a payload on one line with control characters escaped.

    Mutated payloads routinely carry raw code points below 0x20 (and 0x7f),
    which would garble a terminal. Printable text is kept as is.

    Args:
        payload: Candidate input string
        limit: Maximum number of characters of ``payload`` to render (optional)

    Returns:
        Escaped string, with a trailing "..." when truncated
    """
    truncated = limit is not None and len(payload) > limit
    if truncated:
        payload = payload[:limit]
    parts = []
    for ch in payload:
        if ch == "\\":
            parts.append("\\\\")
        elif ch == "\n":
            parts.append("\\n")
        elif ch == "\t":
            parts.append("\\t")
        elif ch == "\r":
            parts.append("\\r")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append("\\x%02x" % ord(ch))
        else:
            parts.append(ch)
    text = "".join(parts)
    return text + "..." if truncated else text

from time import (
    perf_counter,
    perf_counter_ns,
    strftime,
    time as time_sec,
)


def time_s() -> float:
    """
    Get the current wall-clock time in seconds since the epoch.

    Returns
    -------
    float
        The current time in seconds.
    """
    return time_sec()


def time_ms() -> float:
    """
    Get a monotonic timestamp in milliseconds.

    Only differences between two readings are meaningful. This is the
    clock used to time candidate calls.

    Returns
    -------
    float
        The monotonic counter in milliseconds.
    """
    return perf_counter() * 1_000.0


def time_ns() -> int:
    """
    Get a monotonic timestamp in nanoseconds.

    Returns
    -------
    int
        The monotonic counter in nanoseconds.
    """
    return perf_counter_ns()


def time_iso8601() -> str:
    """
    Get the current time in the format 'YYYY-MM-DD HH:MM:SS.mmm'.

    Returns
    -------
    str
        The current time string.
    """
    millis = int(time_sec() * 1_000.0) % 1_000
    return strftime("%Y-%m-%d %H:%M:%S") + f".{millis:03d}"

"""
Thread-local decode trace utilities.

Every decode call may write a short trace (encoding kind, resolved CRS, axis
swap). The trace goes to the ``services.geoxacml`` logger and, when a host has
registered one for the current thread, to a per-thread trace file. This lets
a policy engine capture the trace of one evaluation without passing file
handles through the decoder.

Usage:
    from services.geoxacml.utils.logging import log, set_log_file, close_log_file

    set_log_file(open("decision-42.trace", "w"))
    try:
        value = decode("SRID=4326;POINT(38.889444 -77.035278)")
    finally:
        close_log_file()
"""

import logging
import threading
from typing import Optional, TextIO

logger = logging.getLogger("services.geoxacml.trace")

# Each evaluation thread owns its trace file
_thread_local = threading.local()


def log(message: str) -> None:
    """
    Write a trace message to the logger and the thread-local trace file.

    Args:
        message: Message to log (newline appended for file output)
    """
    logger.debug(message)
    log_file = getattr(_thread_local, "log_file", None)
    if log_file:
        try:
            log_file.write(message + "\n")
            log_file.flush()
        except ValueError:
            # Closed file: stop tracing for this thread
            _thread_local.log_file = None


def set_log_file(log_file: Optional[TextIO]) -> None:
    """
    Set the trace file for the current thread.

    Args:
        log_file: File object to write the trace to, or None to disable
    """
    _thread_local.log_file = log_file


def close_log_file() -> None:
    """
    Close and clear the thread-local trace file if one is open.

    Safe to call multiple times; use it in a finally block.
    """
    log_file = getattr(_thread_local, "log_file", None)
    if log_file:
        set_log_file(None)
        if not log_file.closed:
            log_file.close()


def get_log_file() -> Optional[TextIO]:
    """Return the current thread's trace file, or None."""
    return getattr(_thread_local, "log_file", None)

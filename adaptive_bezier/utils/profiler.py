"""Lightweight profiling: wall-clock timers.

Provides:
    - timer(): Context manager for wall-clock timing with optional sink

Used to measure batch flattening in the CLI and the golden runner.
No heavy dependencies (no line_profiler, no cProfile overhead).
"""

import time
from contextlib import contextmanager
from typing import Callable, Optional


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Context manager for wall-clock timing.

    Parameters
    ----------
    name : str
        Timer name (for logging/display)
    sink : Optional[Callable[[str, float], None]]
        Optional callback(name, elapsed_seconds)
        If None, prints to stdout

    Examples
    --------
    >>> with timer("flatten"):
    ...     pts = adaptive_bezier_curve(start, c1, c2, end, 2.0)
    flatten: 0.001 s

    >>> def log_elapsed(name, elapsed):
    ...     logger.info("%s took %.3f s", name, elapsed)
    >>> with timer("batch", sink=log_elapsed):
    ...     flatten_curves(curves)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if sink is not None:
            sink(name, elapsed)
        else:
            print(f"{name}: {elapsed:.3f} s")

# profiler.py

import time
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(slots=True)
class Segment:
    total: float = 0.0            # seconds
    count: int = 0
    started: Optional[float] = None


# Time spent per named segment since the last report
_profile_accumulators: Dict[str, Segment] = {}

enabled_profiler = True

class Profiler:
    @staticmethod
    def profile_accumulate_start(name: str):
        if enabled_profiler:
            _profile_accumulators.setdefault(name, Segment()).started = time.perf_counter()

    @staticmethod
    def profile_accumulate_end(name: str):
        segment = _profile_accumulators.get(name)
        if not enabled_profiler or segment is None or segment.started is None:
            return  # disabled, or an end without a start
        segment.total += time.perf_counter() - segment.started
        segment.count += 1
        segment.started = None

    @staticmethod
    def profile_accumulate_report(intervals=1):
        """Prints time per frame for every segment, then starts over."""
        if not enabled_profiler:
            return
        print(f"==== Profile over {intervals} frames ====")
        for name, segment in sorted(_profile_accumulators.items()):
            if segment.count:
                print(f"{name}: {segment.total * 1000 / intervals:.3f}ms/frame ({segment.count} calls)")
        _profile_accumulators.clear()

    @staticmethod
    def timed(name=""):
        """Decorator, times every call under "f:<name>" (the function name by default)."""
        def wrapper(fn):
            label = "f:" + (name or fn.__name__)
            def inner(*args, **kwargs):
                Profiler.profile_accumulate_start(label)
                try:
                    return fn(*args, **kwargs)
                finally:
                    Profiler.profile_accumulate_end(label)
            return inner
        return wrapper


class FrameTimer:
    """Measures one frame at a time, start() at the top of the loop and end() after presenting."""
    def __init__(self):
        self._start = None
        self.last_frame_ms = 0.0

    def start(self):
        self._start = time.perf_counter()

    def end(self, log=True) -> float:
        if self._start is None:
            return 0.0
        self.last_frame_ms = (time.perf_counter() - self._start) * 1000.0
        self._start = None
        if log:
            print(f"Frame time: {self.last_frame_ms:.3f}ms")
        return self.last_frame_ms

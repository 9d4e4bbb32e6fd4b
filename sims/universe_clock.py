import time


class UniverseClock:
    # Simulated universal time with time warp, driven by a real-time source.
    def __init__(self, start_ut: float = 0.0, warp: float = 1.0, real_clock=time.monotonic):
        if warp < 0.0:
            raise ValueError("warp must be non-negative")

        self._real_clock = real_clock
        self._anchor_ut = float(start_ut)
        self._anchor_real = self._real_clock()
        self._warp = float(warp)

    def __call__(self) -> float:
        return self.now()

    def now(self) -> float:
        elapsed = self._real_clock() - self._anchor_real
        return self._anchor_ut + max(0.0, elapsed) * self._warp

    @property
    def warp(self) -> float:
        return self._warp

    def set_warp(self, warp: float) -> None:
        if warp < 0.0:
            raise ValueError("warp must be non-negative")
        self._reanchor(self.now())
        self._warp = float(warp)

    def advance(self, dt: float) -> None:
        # Jump forward without waiting on the real clock.
        self._reanchor(self.now() + max(0.0, float(dt)))

    def set_time(self, ut: float) -> None:
        self._reanchor(float(ut))

    def _reanchor(self, ut: float) -> None:
        self._anchor_ut = ut
        self._anchor_real = self._real_clock()

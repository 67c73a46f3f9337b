import time
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Mapping


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: float


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Счетчик запросов с фиксированным окном, хранится в памяти процесса"""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = Lock()

    def check(self, key: str, limit: int, window_seconds: float) -> RateLimitResult:
        """Учитывает запрос и сообщает, укладывается ли он в лимит"""
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)

            # Окно истекло или еще не открыто
            if window is None or window.reset_at <= now:
                reset_at = now + window_seconds
                self._windows[key] = _Window(count=1, reset_at=reset_at)
                return RateLimitResult(allowed=True, remaining=max(limit - 1, 0), reset_at=reset_at)

            if window.count >= limit:
                return RateLimitResult(allowed=False, remaining=0, reset_at=window.reset_at)

            window.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=max(limit - window.count, 0),
                reset_at=window.reset_at
            )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


rate_limiter = RateLimiter()


def get_client_ip(headers: Mapping[str, str]) -> str:
    """Определение IP клиента по заголовкам прокси"""
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or "unknown"

    return headers.get("x-real-ip") or "unknown"

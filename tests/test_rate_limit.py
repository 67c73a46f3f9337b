from app.core.rate_limit import RateLimiter, get_client_ip


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    """Фиксированное окно"""

    def test_sixtieth_allowed_sixty_first_rejected(self):
        limiter = RateLimiter(clock=FakeClock())

        results = [limiter.check("share:1.2.3.4", 60, 60) for _ in range(61)]

        assert all(r.allowed for r in results[:60])
        assert results[59].remaining == 0
        assert results[60].allowed is False

    def test_window_resets_after_expiry(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)

        for _ in range(5):
            limiter.check("k", 5, 60)
        assert limiter.check("k", 5, 60).allowed is False

        clock.now += 60
        result = limiter.check("k", 5, 60)

        assert result.allowed is True
        assert result.remaining == 4
        assert result.reset_at == clock.now + 60

    def test_keys_are_independent(self):
        limiter = RateLimiter(clock=FakeClock())

        limiter.check("a", 1, 60)
        assert limiter.check("a", 1, 60).allowed is False
        assert limiter.check("b", 1, 60).allowed is True

    def test_reset_clears_windows(self):
        limiter = RateLimiter(clock=FakeClock())
        limiter.check("a", 1, 60)
        limiter.reset()
        assert limiter.check("a", 1, 60).allowed is True


class TestClientIp:
    def test_forwarded_for_first_entry(self):
        assert get_client_ip({"x-forwarded-for": "10.0.0.1, 10.0.0.2"}) == "10.0.0.1"

    def test_real_ip_fallback(self):
        assert get_client_ip({"x-real-ip": "10.0.0.9"}) == "10.0.0.9"

    def test_unknown(self):
        assert get_client_ip({}) == "unknown"

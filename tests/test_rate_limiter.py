import bingo.core.rate_limiter as rl
from bingo.core.rate_limiter import InMemoryRateLimiter, rule_for


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_rate_limiter_allows_then_blocks_then_recovers():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(clock=clock)
    key = "ip:auth"

    assert limiter.hit(key, limit=2, window_seconds=10) == (True, 0)
    clock.now += 4
    assert limiter.hit(key, limit=2, window_seconds=10) == (True, 0)
    allowed, retry = limiter.hit(key, limit=2, window_seconds=10)
    assert allowed is False
    assert retry == 6

    # the first hit slides out, the second still counts
    clock.now += 6
    assert limiter.hit(key, limit=2, window_seconds=10) == (True, 0)
    assert limiter.hit(key, limit=2, window_seconds=10)[0] is False


def test_refused_hits_are_not_counted():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(clock=clock)
    limiter.hit("k", limit=1, window_seconds=10)
    for _ in range(5):
        clock.now += 1
        assert limiter.hit("k", limit=1, window_seconds=10)[0] is False
    clock.now += 5
    assert limiter.hit("k", limit=1, window_seconds=10) == (True, 0)


def test_idle_keys_are_dropped():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(clock=clock)
    for n in range(50):
        limiter.hit(f"10.0.0.{n}:auth", limit=5)
    assert len(limiter) == 50

    clock.now += rl.WINDOW_SECONDS + 1
    limiter.hit("10.0.1.1:auth", limit=5)
    assert len(limiter) == 1


def test_recent_keys_survive_a_sweep():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(clock=clock)
    limiter.hit("old", limit=5)
    clock.now += rl.WINDOW_SECONDS - 1
    limiter.hit("recent", limit=5)
    clock.now += 2
    limiter.hit("new", limit=5)
    assert len(limiter) == 2


def test_reset_clears_all_windows():
    limiter = InMemoryRateLimiter()
    limiter.hit("k", limit=1, window_seconds=60)
    assert limiter.hit("k", limit=1, window_seconds=60)[0] is False
    limiter.reset()
    assert len(limiter) == 0
    assert limiter.hit("k", limit=1, window_seconds=60)[0] is True


def test_rule_for_routes(monkeypatch):
    monkeypatch.setattr(rl.settings, "rate_limit_auth_per_min", 5)
    monkeypatch.setattr(rl.settings, "rate_limit_message_per_min", 6)
    monkeypatch.setattr(rl.settings, "rate_limit_upload_per_min", 7)
    assert rule_for("POST", "/auth/login") == ("auth", 5)
    assert rule_for("POST", "/auth/register") == ("auth", 5)
    assert rule_for("POST", "/messages") == ("message", 6)
    assert rule_for("POST", "/conversations/abc/messages") == ("message", 6)
    assert rule_for("POST", "/documents") == ("upload", 7)
    assert rule_for("GET", "/conversations/abc/messages") is None
    assert rule_for("POST", "/match-request") is None


def test_check_applies_route_buckets(monkeypatch):
    monkeypatch.setattr(rl.settings, "rate_limit_upload_per_min", 1)
    limiter = InMemoryRateLimiter()

    assert limiter.check("1.2.3.4", "POST", "/documents") == (True, 0)
    allowed, retry = limiter.check("1.2.3.4", "POST", "/documents")
    assert allowed is False and retry >= 1
    # other clients and unlimited routes are unaffected
    assert limiter.check("5.6.7.8", "POST", "/documents")[0] is True
    assert limiter.check("1.2.3.4", "GET", "/documents")[0] is True

from concurrent.futures import ThreadPoolExecutor

import pytest

from scaffold.core.options import with_enable_rate
from scaffold.errno import ERR_MANY_REQUEST
from scaffold.middleware.rate_limit import MAX_BURST_SIZE, TokenBucket


def test_bucket_allows_burst_then_denies(clock):
    bucket = TokenBucket(rate=1.0, burst=100, clock=clock)

    assert all(bucket.allow() for _ in range(100))
    assert not bucket.allow()


def test_bucket_refills_one_token_per_second(clock):
    bucket = TokenBucket(rate=1.0, burst=100, clock=clock)
    for _ in range(100):
        bucket.allow()

    clock.advance(1.0)

    assert bucket.allow()
    assert not bucket.allow()


def test_bucket_never_exceeds_burst(clock):
    bucket = TokenBucket(rate=1.0, burst=3, clock=clock)
    clock.advance(3600)

    assert [bucket.allow() for _ in range(4)] == [True, True, True, False]


def test_bucket_is_safe_under_concurrent_allow(clock):
    bucket = TokenBucket(rate=1.0, burst=100, clock=clock)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: bucket.allow(), range(400)))

    assert results.count(True) == 100


def test_bucket_rejects_bad_parameters():
    with pytest.raises(ValueError):
        TokenBucket(rate=0)
    with pytest.raises(ValueError):
        TokenBucket(burst=0)


def test_default_burst():
    assert TokenBucket().burst == MAX_BURST_SIZE == 100


def test_rate_gate_rejects_with_business_code(make_server, clock, journals):
    mux, client = make_server(with_enable_rate(), limiter=TokenBucket(1.0, 100, clock=clock))
    called = []
    mux.group("/api").get("/work", lambda ctx: called.append(1))

    responses = [client.get("/api/work") for _ in range(101)]

    assert all(r.status_code == 200 for r in responses)
    limited = [r for r in responses if r.content and r.json()["code"] == ERR_MANY_REQUEST.code]
    assert len(limited) == 1
    assert limited[0].json()["msg"] == "Too Many Requests"
    assert limited[0].json()["request_id"] == limited[0].headers["Journal-Id"]
    assert len(called) == 100

    # The rejected request still goes through the journal.
    logged = journals()
    assert len(logged) == 101
    assert logged[-1]["success"] is False
    assert logged[-1]["response"]["body"]["code"] == ERR_MANY_REQUEST.code


def test_rate_gate_recovers_after_pause(make_server, clock):
    mux, client = make_server(with_enable_rate(), limiter=TokenBucket(1.0, 100, clock=clock))
    mux.group("/api").get("/work", lambda ctx: None)

    for _ in range(100):
        assert not client.get("/api/work").content

    clock.advance(1.0)

    assert not client.get("/api/work").content


def test_rate_gate_disabled_by_default(make_server):
    mux, client = make_server()
    mux.group("/api").get("/work", lambda ctx: None)

    responses = [client.get("/api/work") for _ in range(120)]

    assert all(not r.content for r in responses)


def test_rate_limited_journal_keeps_body(make_server, clock, journals):
    mux, client = make_server(with_enable_rate(), limiter=TokenBucket(1.0, 1, clock=clock))
    mux.group("/api").post("/orders", lambda ctx: None)

    client.post("/api/orders", content=b'{"id": 1}')
    limited = client.post("/api/orders", content=b'{"id": 2}')

    assert limited.json()["code"] == ERR_MANY_REQUEST.code
    logged = journals()
    assert [j["request"]["body"] for j in logged] == ['{"id": 1}', '{"id": 2}']

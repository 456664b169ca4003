from core.headers import HeaderBuilder


def test_upstream_headers_stripped_and_accept_forced():
    builder = HeaderBuilder()

    headers = builder.build_upstream_headers(
        [
            ("Host", "localhost:3000"),
            ("Referer", "https://app.local/"),
            ("origin", "https://app.local"),
            ("accept", "*/*"),
            ("authorization", "Bearer t"),
            ("x-trace", "1"),
            ("x-trace", "2"),
        ]
    )

    assert headers == [
        ("authorization", "Bearer t"),
        ("x-trace", "1"),
        ("x-trace", "2"),
        ("Accept", "application/json"),
    ]


def test_accept_added_when_missing():
    assert HeaderBuilder().build_upstream_headers([]) == [("Accept", "application/json")]


def test_request_framing_headers_not_forwarded():
    headers = HeaderBuilder().build_upstream_headers(
        [("content-length", "12"), ("transfer-encoding", "chunked"), ("content-type", "application/json")]
    )

    assert ("content-type", "application/json") in headers
    assert all(key not in ("content-length", "transfer-encoding") for key, _ in headers)


def test_copy_response_headers_skips_stale_and_replaced():
    copied = HeaderBuilder().copy_response_headers(
        [
            ("content-length", "42"),
            ("content-encoding", "gzip"),
            ("content-type", "text/plain"),
            ("set-cookie", "a=1"),
            ("set-cookie", "b=2"),
            ("x-request-id", "abc"),
        ],
        replaced=["Content-Type"],
    )

    assert copied == [
        ("set-cookie", "a=1"),
        ("set-cookie", "b=2"),
        ("x-request-id", "abc"),
    ]


def test_copy_response_headers_skips_hop_by_hop_and_listener_headers():
    copied = HeaderBuilder().copy_response_headers(
        [
            ("Connection", "close"),
            ("Keep-Alive", "timeout=5"),
            ("Upgrade", "h2c"),
            ("Date", "Sat, 17 Oct 2026 10:00:00 GMT"),
            ("Server", "ollama"),
            ("X-Upstream", "yes"),
        ]
    )

    assert copied == [("X-Upstream", "yes")]

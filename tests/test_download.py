import pytest
import requests

from atmystic_dl.core import (
    AttemptError,
    DownloadError,
    FallbackError,
    Fetcher,
    make_clients,
    make_target,
)

from .conftest import CountingClient, FakeClient

BASE = "https://example.invalid/root/"

def test_primary_success_skips_fallback(tmp_path):
    primary = FakeClient("requests", body=b"ok")
    fallback = FakeClient("urllib3", body=b"nope")
    t = make_target("a", BASE, tmp_path)

    res = Fetcher([primary, fallback]).fetch(t)

    assert (res.client, res.size, res.used_fallback) == ("requests", 2, False)
    assert t.out_path.read_bytes() == b"ok"
    assert (primary.calls, fallback.calls) == (1, 0)

def test_primary_failure_uses_fallback_once(tmp_path):
    primary = FakeClient("requests", error=requests.ConnectionError("refused"))
    fallback = FakeClient("urllib3", body=b"from fallback")
    failures = []
    starts = []

    res = Fetcher([primary, fallback]).fetch(
        make_target("a", BASE, tmp_path),
        on_start=lambda name, t: starts.append(name),
        on_fail=failures.append,
    )

    assert res.used_fallback and res.client == "urllib3"
    assert (primary.calls, fallback.calls) == (1, 1)
    assert starts == ["requests", "urllib3"]
    assert len(failures) == 1 and type(failures[0]) is AttemptError

def test_both_failing_raises_nested_error(tmp_path):
    primary = FakeClient("requests", error=requests.HTTPError("404"))
    fallback = FakeClient("urllib3", error=OSError("disk"))
    failures = []
    t = make_target("a", BASE, tmp_path)

    with pytest.raises(DownloadError) as exc:
        Fetcher([primary, fallback]).fetch(t, on_fail=failures.append)

    err = exc.value
    assert err.url == t.url and err.out_path == t.out_path
    assert err.primary.client == "requests" and isinstance(err.primary.error, requests.HTTPError)
    assert isinstance(err.fallback, FallbackError) and err.fallback.client == "urllib3"
    assert err.__cause__ is err.fallback
    assert (primary.calls, fallback.calls) == (1, 1)
    assert [type(f) for f in failures] == [AttemptError, FallbackError]

def test_unreachable_host_tries_fallback_exactly_once(dead_base_url, tmp_path):
    primary, fallback = (CountingClient(c) for c in make_clients())
    t = make_target("delete", dead_base_url, tmp_path)

    with Fetcher([primary, fallback]) as f:
        with pytest.raises(DownloadError):
            f.fetch(t)

    assert (primary.calls, fallback.calls) == (1, 1)
    assert not t.out_path.exists()

def test_http_404_on_primary_recovers_via_fallback(server, tmp_path):
    server.add("flaky.ps1", (404, b"nope"), (200, b"finally"))
    t = make_target("flaky", server.base_url, tmp_path)

    with Fetcher() as f:
        res = f.fetch(t)

    assert res.used_fallback
    assert t.out_path.read_bytes() == b"finally"
    assert server.hits == ["/flaky.ps1", "/flaky.ps1"]

def test_output_dir_is_created(tmp_path):
    out_dir = tmp_path / "deep" / "er"
    Fetcher([FakeClient("p", body=b"x"), FakeClient("f")]).fetch(make_target("a", BASE, out_dir))
    assert (out_dir / "a.ps1").read_bytes() == b"x"

def test_non_transport_errors_propagate(tmp_path):
    primary = FakeClient("requests", error=ValueError("bug"))
    fallback = FakeClient("urllib3", body=b"x")
    with pytest.raises(ValueError):
        Fetcher([primary, fallback]).fetch(make_target("a", BASE, tmp_path))
    assert fallback.calls == 0

def test_fetcher_needs_two_clients():
    with pytest.raises(ValueError):
        Fetcher([FakeClient("only")])

def test_close_closes_clients():
    a, b = FakeClient("a"), FakeClient("b")
    with Fetcher([a, b]):
        pass
    assert a.closed and b.closed

def test_unusable_output_dir_fails_both_attempts(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("i am a file")
    primary, fallback = FakeClient("requests", body=b"x"), FakeClient("urllib3", body=b"x")
    failures = []

    with pytest.raises(DownloadError) as exc:
        Fetcher([primary, fallback]).fetch(make_target("a", BASE, blocker / "sub"), on_fail=failures.append)

    assert isinstance(exc.value.primary.error, OSError)
    assert isinstance(exc.value.fallback.error, OSError)
    assert [type(f) for f in failures] == [AttemptError, FallbackError]
    assert (primary.calls, fallback.calls) == (0, 0)

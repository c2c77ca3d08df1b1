# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from http.cookies import SimpleCookie

import pytest

from authctx.config import ContextSettings
from authctx.context import WebContext
from authctx.errors import ContextPathError, ErrorCategory, TechnicalError
from authctx.http.adapters import StubRequest, StubResponse
from authctx.http.cookies import Cookie
from authctx.http.exchange import Exchange


def make_context(settings=None, **request_kwargs):
    req = StubRequest(**request_kwargs)
    res = StubResponse()
    return WebContext(Exchange(req=req, res=res), settings or ContextSettings()), req, res


class FailingReader:
    def __iter__(self):
        raise OSError("connection reset")


def test_native_context_is_wrapped_exchange():
    ctx, req, res = make_context()
    assert ctx.native_context.req is req
    assert ctx.native_context.res is res


def test_request_parameter_single_and_missing():
    ctx, _, _ = make_context(parameters={"a": ["1", "2"], "b": ["x"]})
    assert ctx.get_request_parameter("a") == "1"
    assert ctx.get_request_parameter("missing") is None


def test_request_parameters_preserve_order_and_empty_mapping():
    ctx, _, _ = make_context(parameters={"a": ["3", "1", "2"]})
    assert ctx.get_request_parameters() == {"a": ["3", "1", "2"]}

    empty, _, _ = make_context()
    assert empty.get_request_parameters() == {}


def test_request_attributes_round_trip():
    ctx, req, _ = make_context()
    assert ctx.get_request_attribute("profile") is None
    profile = object()
    ctx.set_request_attribute("profile", profile)
    assert ctx.get_request_attribute("profile") is profile
    assert req.attributes["profile"] is profile


@pytest.mark.parametrize("name", ["x-test", "X-TEST", "X-Test", "x-TeSt"])
def test_request_header_is_case_insensitive(name):
    ctx, _, _ = make_context(headers={"X-Test": "abc"})
    assert ctx.get_request_header(name) == "abc"


def test_request_header_missing_and_none_name():
    ctx, _, _ = make_context(headers={"X-Test": "abc"})
    assert ctx.get_request_header("missing") is None
    assert ctx.get_request_header(None) is None


def test_request_header_without_any_headers():
    ctx, _, _ = make_context()
    assert ctx.get_request_header("x-test") is None


def test_request_header_uses_first_matching_name():
    ctx, _, _ = make_context(headers=[("accept", "text/html"), ("ACCEPT", "application/json")])
    assert ctx.get_request_header("Accept") == "text/html"


def test_response_headers_and_content_type():
    ctx, _, res = make_context()
    ctx.set_response_header("X-Frame-Options", "DENY")
    ctx.set_response_header("X-Frame-Options", "SAMEORIGIN")
    assert ctx.get_response_header("X-Frame-Options") == "SAMEORIGIN"
    assert ctx.get_response_header("Location") is None

    ctx.set_response_content_type("application/json")
    assert res.get_headers("Content-Type") == ["application/json"]


def test_request_metadata_is_passed_through():
    ctx, _, _ = make_context(
        method="POST",
        remote_addr="10.0.0.5",
        server_name="example.org",
        server_port=8443,
        scheme="https",
        protocol="HTTP/2",
        secure=True,
    )
    assert ctx.get_request_method() == "POST"
    assert ctx.get_remote_addr() == "10.0.0.5"
    assert ctx.get_server_name() == "example.org"
    assert ctx.get_server_port() == 8443
    assert ctx.get_scheme() == "https"
    assert ctx.get_protocol() == "HTTP/2"
    assert ctx.is_secure() is True


def test_request_metadata_defaults_are_not_transformed():
    ctx, _, _ = make_context(method="", server_port=0, remote_addr="")
    assert ctx.get_request_method() == ""
    assert ctx.get_server_port() == 0
    assert ctx.get_remote_addr() == ""


def test_request_urls_with_query():
    ctx, _, _ = make_context(url="http://host/path", query_string="x=1&y=2")
    assert ctx.get_request_url() == "http://host/path"
    assert ctx.get_full_request_url() == "http://host/path?x=1&y=2"


def test_request_url_truncates_at_first_question_mark():
    ctx, _, _ = make_context(url="http://host/path?x=1?y=2", query_string=None)
    assert ctx.get_request_url() == "http://host/path"
    assert ctx.get_full_request_url() == "http://host/path?x=1?y=2"


def test_full_request_url_appends_empty_query_but_not_missing_one():
    empty_query, _, _ = make_context(url="http://host/path", query_string="")
    assert empty_query.get_full_request_url() == "http://host/path?"

    no_query, _, _ = make_context(url="http://host/path", query_string=None)
    assert no_query.get_full_request_url() == "http://host/path"


def test_full_request_url_does_not_reencode_query():
    ctx, _, _ = make_context(url="http://host/p", query_string="q=a b&r=%2F")
    assert ctx.get_full_request_url() == "http://host/p?q=a b&r=%2F"


def test_path_collapses_double_slash_then_strips_context():
    ctx, _, _ = make_context(request_uri="//app/users", context_path="/app")
    assert ctx.get_path() == "/users"


def test_path_without_context_and_without_uri():
    ctx, _, _ = make_context(request_uri="//a/b", context_path=None)
    assert ctx.get_path() == "/a/b"

    missing, _, _ = make_context(request_uri=None)
    assert missing.get_path() == ""


def test_path_only_removes_one_leading_slash():
    ctx, _, _ = make_context(request_uri="///a", context_path=None)
    assert ctx.get_path() == "//a"


def test_path_context_mismatch_raises_by_default():
    ctx, _, _ = make_context(request_uri="/other/users", context_path="/app")
    with pytest.raises(ContextPathError) as excinfo:
        ctx.get_path()
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.category == ErrorCategory.CONTEXT_PATH_MISMATCH


def test_path_context_mismatch_passthrough_policy():
    settings = ContextSettings(context_path_mismatch="passthrough")
    ctx, _, _ = make_context(settings=settings, request_uri="//other/users", context_path="/app")
    assert ctx.get_path() == "/other/users"


def test_request_cookies_are_translated_in_order():
    jar = SimpleCookie()
    jar.load("session=abc; theme=dark")
    secure = Cookie("remember", "1", domain="example.org", path="/app", max_age=60, secure=True, http_only=True)
    ctx, _, _ = make_context(cookies=[*jar.values(), secure.to_morsel()])

    cookies = ctx.get_request_cookies()
    assert [c.name for c in cookies] == ["session", "theme", "remember"]
    assert cookies[0] == Cookie("session", "abc")
    assert cookies[0].max_age == -1
    assert cookies[2].domain == "example.org"
    assert cookies[2].path == "/app"
    assert cookies[2].max_age == 60
    assert cookies[2].secure is True
    assert cookies[2].http_only is True


def test_request_cookies_none_or_empty():
    ctx, _, _ = make_context(cookies=None)
    assert ctx.get_request_cookies() == []
    ctx, _, _ = make_context(cookies=[])
    assert ctx.get_request_cookies() == []


def test_add_response_cookie_adds_distinct_headers():
    ctx, _, res = make_context()
    ctx.add_response_cookie(Cookie("a", "1"))
    ctx.add_response_cookie(Cookie("b", "2", secure=True, http_only=True))

    values = res.get_headers("Set-Cookie")
    assert len(values) == 2
    assert values[0] == "a=1; Path=/; SameSite=Lax"
    assert values[1] == "b=2; Path=/; SameSite=Lax; Secure; HttpOnly"


def test_add_response_cookie_uses_configured_same_site():
    ctx, _, res = make_context(settings=ContextSettings(default_same_site="strict"))
    ctx.add_response_cookie(Cookie("a", "1"))
    assert res.get_header("set-cookie") == "a=1; Path=/; SameSite=Strict"


def test_request_content_drops_line_terminators():
    ctx, _, _ = make_context(body="first\nsecond\r\nthird")
    assert ctx.get_request_content() == "firstsecondthird"


def test_request_content_is_memoized():
    ctx, req, _ = make_context(body="payload\n")
    first = ctx.get_request_content()
    second = ctx.get_request_content()
    assert first == second == "payload"
    assert first is second
    assert req.reader_calls == 1


def test_request_content_empty_body_is_cached():
    ctx, req, _ = make_context(body="")
    assert ctx.get_request_content() == ""
    assert ctx.get_request_content() == ""
    assert req.reader_calls == 1


def test_request_content_wraps_io_errors():
    cause = OSError("stream closed")
    ctx, _, _ = make_context(body=cause)
    with pytest.raises(TechnicalError) as excinfo:
        ctx.get_request_content()
    assert excinfo.value.__cause__ is cause
    assert excinfo.value.cause is cause
    assert excinfo.value.category == ErrorCategory.IO_ERROR


def test_request_content_wraps_errors_raised_while_iterating():
    ctx, req, _ = make_context()
    req.get_reader = lambda: FailingReader()
    with pytest.raises(TechnicalError) as excinfo:
        ctx.get_request_content()
    assert isinstance(excinfo.value.__cause__, OSError)
    assert "connection reset" in str(excinfo.value)


def test_request_content_splits_on_lone_carriage_return():
    ctx, _, _ = make_context(body="a\rb\nc")
    assert ctx.get_request_content() == "abc"

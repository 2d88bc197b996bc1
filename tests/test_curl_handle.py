import io

import pycurl
import pytest

from xfer_client import (
    ConnectionRefusedError,
    CurlError,
    CurlHandle,
    HandleState,
    InvalidArgumentError,
    RuntimeStateError,
)
from xfer_client.request import ftp, http, ssh


def _translate(request):
    return CurlHandle()._translate(request.prepare())


def test_defaults_follow_redirects_and_keep_headers() -> None:
    options = CurlHandle().options
    assert options[pycurl.FOLLOWLOCATION] is True
    assert options[pycurl.HEADER] is True


def test_get_and_head_select_canned_verbs() -> None:
    get = _translate(http.Get("http://example.com", timeout=2.5, user_agent="xfer/1"))
    assert get[pycurl.URL] == "http://example.com"
    assert get[pycurl.HTTPGET] is True
    assert get[pycurl.TIMEOUT_MS] == 2500
    assert get[pycurl.USERAGENT] == "xfer/1"
    assert pycurl.POSTFIELDS not in get

    head = _translate(http.Head("http://example.com"))
    assert head[pycurl.NOBODY] is True
    assert pycurl.HTTPGET not in head


def test_post_sends_fields_with_size() -> None:
    options = _translate(http.Post("http://example.com", body="a=1&b=2"))
    assert options[pycurl.POST] is True
    assert options[pycurl.POSTFIELDS] == b"a=1&b=2"
    assert options[pycurl.POSTFIELDSIZE_LARGE] == 7
    assert pycurl.CUSTOMREQUEST not in options


def test_put_stream_uploads_with_read_callback() -> None:
    stream = io.BytesIO(b"*" * 200)
    options = _translate(http.Put("http://example.com", body=stream))
    assert options[pycurl.CUSTOMREQUEST] == "PUT"
    assert options[pycurl.UPLOAD] is True
    assert options[pycurl.INFILESIZE_LARGE] == 200
    assert options[pycurl.READFUNCTION](50) == b"*" * 50


def test_custom_verb_is_passed_through() -> None:
    options = _translate(http.Custom("PATCH", "http://example.com", body="x"))
    assert options[pycurl.CUSTOMREQUEST] == "PATCH"
    assert options[pycurl.POSTFIELDS] == b"x"


def test_http_configuration_options() -> None:
    request = http.Get("https://example.com").follow_redirects(False, max_redirects=2)
    request.verify_tls(False).accept_encoding("gzip").referer_on_redirect(True)
    options = _translate(request)
    assert options[pycurl.FOLLOWLOCATION] is False
    assert options[pycurl.MAXREDIRS] == 2
    assert options[pycurl.SSL_VERIFYPEER] == 0
    assert options[pycurl.SSL_VERIFYHOST] == 0
    assert options[pycurl.ACCEPT_ENCODING] == "gzip"
    assert options[pycurl.AUTOREFERER] is True


def test_ftp_and_ssh_commands() -> None:
    get = ftp.Get("ftp://example.com/f", pre_commands=["CWD pub"], post_commands=["DELE f"])
    options = _translate(get.passive(False))
    assert options[pycurl.FTPPORT] == "-"
    assert options[pycurl.QUOTE] == ["CWD pub"]
    assert options[pycurl.POSTQUOTE] == ["DELE f"]
    assert pycurl.HTTPGET not in options

    put = _translate(ssh.Put("sftp://example.com/tmp/f", body=b"abc", post_commands=["chmod 600 /tmp/f"]))
    assert put[pycurl.UPLOAD] is True
    assert put[pycurl.INFILESIZE_LARGE] == 3
    assert put[pycurl.POSTQUOTE] == ["chmod 600 /tmp/f"]
    assert pycurl.QUOTE not in put


def test_absent_values_are_not_handed_to_curl() -> None:
    handle = CurlHandle()
    merged = handle.merge_options(handle._translate(ftp.Get("ftp://example.com/f").prepare()))
    assert pycurl.FTPPORT not in merged
    assert pycurl.QUOTE not in merged
    assert pycurl.TIMEOUT_MS not in merged
    assert merged[pycurl.HEADER] is True


def test_reset_keeps_handle_open() -> None:
    with CurlHandle(options={pycurl.MAXREDIRS: 1}) as handle:
        assert handle.options[pycurl.MAXREDIRS] == 1
        assert handle.reset() is True
        assert pycurl.MAXREDIRS not in handle.options
        assert handle.state is HandleState.OPEN


def test_closed_handle_refuses_to_execute() -> None:
    handle = CurlHandle()
    with handle:
        pass
    with pytest.raises(RuntimeStateError):
        handle.execute(http.Get("http://example.com").prepare())


def _run(request):
    with CurlHandle() as handle:
        return request.execute(handle)


def test_get_against_local_server(http_server) -> None:
    response = _run(http.Get(f"{http_server}/index.html", user_agent="xfer-test"))
    assert response.status == 200
    assert response.body == b"<h1>index</h1>"
    assert response.get_header("x-method") == "GET"
    assert response.get_header("X-Agent") == "xfer-test"
    assert response.infos.effective_url.endswith("/index.html")
    assert "GET /index.html" in response.infos.headers_out


def test_post_echoes_body_and_headers(http_server) -> None:
    request = http.Post(f"{http_server}/echo", body='{"body": "I\'m the body"}}')
    request.add_header("X-Test", "Value")
    response = _run(request)
    assert response.status == 200
    assert response.get_header("X-Method") == "POST"
    assert response.get_header("X-Test") == "Value"
    assert response.body == b'{"body": "I\'m the body"}}'


def test_put_uploads_stream(http_server) -> None:
    stream = io.BytesIO(b"*" * 200)
    stream.seek(50)
    response = _run(http.Put(f"{http_server}/upload", body=stream))
    assert response.get_header("X-Method") == "PUT"
    assert response.get_header("X-Received") == "200"


def test_head_and_delete(http_server) -> None:
    head = _run(http.Head(f"{http_server}/index.html"))
    assert head.status == 200
    assert head.body == b""

    delete = _run(http.Delete(f"{http_server}/item/1"))
    assert delete.get_header("X-Method") == "DELETE"
    assert delete.get_header("X-Received") == "0"


def test_redirect_is_followed_and_last_block_wins(http_server) -> None:
    response = _run(http.Get(f"{http_server}/redirect"))
    assert response.status == 200
    assert response.body == b"<h1>index</h1>"
    assert not response.has_header("Location")


def test_redirect_not_followed_when_disabled(http_server) -> None:
    response = _run(http.Get(f"{http_server}/redirect").follow_redirects(False))
    assert response.status == 302
    assert response.get_header("Location") == "/index.html"


def test_error_status_is_a_response(http_server) -> None:
    response = _run(http.Get(f"{http_server}/missing"))
    assert response.status == 404
    assert not response.is_success


def test_refused_connection_is_classified(closed_port) -> None:
    with pytest.raises(ConnectionRefusedError) as info:
        _run(http.Get(f"http://127.0.0.1:{closed_port}/"))
    assert info.value.code == 7
    assert isinstance(info.value.__cause__, pycurl.error)


def test_one_handle_runs_successive_plans_independently(http_server) -> None:
    with CurlHandle() as handle:
        put = http.Put(f"{http_server}/upload", body="abc").execute(handle)
        get = http.Get(f"{http_server}/index.html").execute(handle)
        head = http.Head(f"{http_server}/index.html").execute(handle)
        delete = http.Delete(f"{http_server}/item/1").execute(handle)
        post = http.Post(f"{http_server}/echo", body="x=1").execute(handle)

    assert put.get_header("X-Method") == "PUT"
    assert put.get_header("X-Received") == "3"
    assert get.get_header("X-Method") == "GET"
    assert get.body == b"<h1>index</h1>"
    assert head.body == b""
    assert delete.get_header("X-Method") == "DELETE"
    assert post.get_header("X-Method") == "POST"
    assert post.body == b"x=1"


def test_reset_then_execute_behaves_like_a_fresh_handle(http_server) -> None:
    with CurlHandle(options={pycurl.MAXREDIRS: 0}) as handle:
        with pytest.raises(CurlError) as info:
            http.Get(f"{http_server}/redirect").execute(handle)
        assert info.value.code == 47

        assert handle.reset() is True
        response = http.Get(f"{http_server}/redirect").execute(handle)
    assert response.status == 200
    assert response.body == b"<h1>index</h1>"


def test_non_ascii_header_is_an_argument_error(http_server) -> None:
    request = http.Get(f"{http_server}/index.html").add_header("X-Name", "café")
    with CurlHandle() as handle, pytest.raises(InvalidArgumentError) as info:
        request.execute(handle)
    assert isinstance(info.value.__cause__, UnicodeEncodeError)


def test_perform_without_native_resource_is_a_state_error() -> None:
    handle = CurlHandle()
    with pytest.raises(RuntimeStateError):
        handle._perform(http.Get("http://example.com").prepare(), {})

from __future__ import annotations

import io

import pytest

from xfer_client import (
    ExecutionInfos,
    InvalidArgumentError,
    RawOutcome,
    Response,
    RuntimeStateError,
    StreamBody,
    Transmission,
    Verb,
)
from xfer_client.handle.base import TransferHandle
from xfer_client.request import ftp, http, ssh


def _outcome(body: bytes = b"ok") -> RawOutcome:
    head = b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\n"
    return RawOutcome(content=head + body, infos=ExecutionInfos(status=200, header_size=len(head)))


class DummyHandle(TransferHandle):
    name = "dummy"

    def __init__(self, outcome: RawOutcome | None = None, error: Exception | None = None) -> None:
        super().__init__()
        self.outcome = outcome or _outcome()
        self.error = error
        self.plans = []

    def _acquire(self) -> None:
        pass

    def _release(self) -> None:
        pass

    def _translate(self, plan):
        return {}

    def _perform(self, plan, options):
        self.plans.append(plan)
        if self.error is not None:
            raise self.error
        return self.outcome


def test_get_prepares_canned_verb_without_body() -> None:
    request = http.Get("http://example.com/index.html", body="ignored")
    plan = request.prepare()
    assert plan.verb is Verb.GET
    assert plan.method == "GET"
    assert plan.transmission is Transmission.NONE
    assert plan.body.length == 0


def test_head_marks_no_body() -> None:
    plan = http.Head("http://example.com").prepare()
    assert plan.verb is Verb.HEAD
    assert plan.transmission is Transmission.NONE


def test_post_always_sends_fields() -> None:
    request = http.Post("http://example.com").set_body('{"body": "I\'m the body"}}')
    plan = request.prepare()
    assert plan.verb is Verb.POST
    assert plan.transmission is Transmission.FIELDS
    assert plan.body.data == b'{"body": "I\'m the body"}}'

    empty = http.Post("http://example.com").prepare()
    assert empty.transmission is Transmission.FIELDS
    assert empty.body.length == 0


def test_put_string_uses_fields_and_stream_uses_upload() -> None:
    from_string = http.Put("http://example.com").prepare()
    assert from_string.verb is Verb.CUSTOM
    assert from_string.method == "PUT"
    assert from_string.transmission is Transmission.FIELDS

    stream = io.BytesIO(b"*" * 200)
    from_stream = http.Put("http://example.com").set_body(stream).prepare()
    assert from_stream.transmission is Transmission.UPLOAD
    assert isinstance(from_stream.body, StreamBody)
    assert from_stream.body.length == 200


def test_set_body_rewinds_stream() -> None:
    stream = io.BytesIO(b"0123456789")
    stream.seek(7)
    http.Put("http://example.com").set_body(stream)
    assert stream.tell() == 0


def test_prepare_rewinds_stream_again() -> None:
    stream = io.BytesIO(b"0123456789")
    request = http.Put("http://example.com").set_body(stream)
    stream.read()
    request.prepare()
    assert stream.tell() == 0


def test_delete_sends_body_only_when_present() -> None:
    assert http.Delete("http://example.com").prepare().transmission is Transmission.NONE
    with_body = http.Delete("http://example.com", body="id=1").prepare()
    assert with_body.verb is Verb.CUSTOM
    assert with_body.transmission is Transmission.FIELDS


def test_custom_verb_passes_through() -> None:
    request = http.Custom("propfind", "http://example.com/dav", body="<xml/>")
    plan = request.prepare()
    assert plan.method == "PROPFIND"
    assert plan.verb is Verb.CUSTOM
    assert plan.transmission is Transmission.FIELDS


@pytest.mark.parametrize("url", ["", None, 3.14])
def test_invalid_url_never_reaches_handle(url) -> None:
    with pytest.raises(InvalidArgumentError):
        http.Get(url)


def test_non_local_stream_is_rejected() -> None:
    class Pipe:
        def read(self, size=-1):
            return b""

        def seek(self, offset, whence=0):
            raise OSError("not seekable")

        def seekable(self):
            return False

    with pytest.raises(InvalidArgumentError):
        http.Put("http://example.com").set_body(Pipe())


def test_unknown_option_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        http.Get("http://example.com", passive=True)
    with pytest.raises(InvalidArgumentError):
        http.Get("http://example.com").configure(method="POST")


def test_wrongly_typed_option_is_rejected_on_construction_and_configure() -> None:
    with pytest.raises(InvalidArgumentError):
        http.Get("http://example.com", timeout="3")
    request = http.Get("http://example.com")
    with pytest.raises(InvalidArgumentError) as info:
        request.configure(timeout="3")
    assert isinstance(info.value.__cause__, TypeError)
    assert request.configuration.timeout is None


def test_headers_are_copied_into_plan() -> None:
    request = http.Get("http://example.com").add_header("X-Test", "Value")
    request.add_headers({"Accept": "text/plain"})
    assert request.get_header("x-test") == "Value"
    assert request.prepare().headers == ("X-Test: Value", "Accept: text/plain")
    request.remove_header("accept")
    assert request.get_header_lines() == ["X-Test: Value"]
    request.remove_headers()
    assert request.get_header_lines() == []


def test_http_fluent_setters() -> None:
    request = http.Get("https://example.com")
    request.follow_redirects(False, max_redirects=3).verify_tls(False).accept_encoding("gzip")
    config = request.configuration
    assert config.allow_redirects is False
    assert config.max_redirects == 3
    assert config.verify_tls is False
    assert config.accept_encoding == "gzip"


def test_ftp_and_ssh_plans() -> None:
    get = ftp.Get("ftp://example.com/file.txt").passive(False).pre_commands("CWD pub")
    plan = get.prepare()
    assert plan.verb is Verb.DEFAULT
    assert plan.transmission is Transmission.NONE
    assert plan.configuration.passive is False
    assert plan.configuration.commands_request() == ("CWD pub",)

    put = ftp.Put("ftp://example.com/upload.txt", body="data")
    assert put.configuration.upload is True
    assert put.prepare().transmission is Transmission.UPLOAD

    sftp = ssh.Put("sftp://example.com/tmp/x", body=b"x").post_commands("rename /tmp/x /tmp/y")
    sftp_plan = sftp.prepare()
    assert sftp_plan.transmission is Transmission.UPLOAD
    assert sftp_plan.configuration.commands_post() == ("rename /tmp/x /tmp/y",)


def test_execute_builds_response_bound_to_request() -> None:
    request = http.Get("http://example.com")
    handle = DummyHandle(_outcome(b"payload"))
    with handle:
        response = request.execute(handle)
    assert isinstance(response, Response)
    assert response.status == 200
    assert response.get_body() == b"payload"
    assert response.get_request() is request
    assert request.plan is handle.plans[0]


def test_double_send_requires_reset() -> None:
    request = http.Get("http://example.com")
    handle = DummyHandle()
    with handle:
        request.execute(handle)
        with pytest.raises(RuntimeStateError):
            request.execute(handle)
        with pytest.raises(RuntimeStateError):
            request.add_header("X-Late", "1")
        request.reset()
        request.execute(handle)
    assert len(handle.plans) == 2


def test_failed_transfer_raises_without_response() -> None:
    request = http.Get("http://example.com")
    handle = DummyHandle(error=RuntimeStateError("boom"))
    with handle, pytest.raises(RuntimeStateError):
        request.execute(handle)
    assert request.is_sent

"""End-to-end scenario demonstrating the Python client API."""

from __future__ import annotations

import io
import logging
import os

from xfer_client import ErrorEvent, HttpxHandle, RequestEvent, ResponseEvent, TransferClient

BASE_URL = os.getenv("XFER_DEMO_URL", "https://httpbin.org")
FTP_URL = os.getenv("XFER_DEMO_FTP_URL")
ENGINE = os.getenv("XFER_DEMO_ENGINE", "curl")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def print_request(event: RequestEvent) -> None:
    print(f"→ {event.request.method} {event.request.url}")


def print_response(event: ResponseEvent) -> None:
    response = event.response
    print(f"← {response.status} {response.reason} ({len(response.body)} bytes, {response.infos.total_time:.3f}s)")


def print_error(event: ErrorEvent) -> None:
    print(f"✗ {event.request.method} {event.request.url}: {event.error}")


def build_client(log_level: str) -> TransferClient:
    handle_factory = HttpxHandle if ENGINE == "httpx" else None
    client = TransferClient(
        BASE_URL,
        handle_factory=handle_factory,
        default_headers={"Accept": "*/*"},
        log_level=log_level,
    )
    client.on_request(print_request)
    client.on_response(print_response)
    client.on_error(print_error)
    return client


def main() -> None:
    log_level = os.getenv("XFER_CLIENT_LOG", "info")
    logging.basicConfig(level=logging.DEBUG if log_level in {"trace", "debug"} else logging.INFO)

    log_section("xfer-client: Real-World Scenario")
    print(f"Talking to {BASE_URL} using the {ENGINE} engine")
    client = build_client(log_level)

    log_section("Step 1: GET and HEAD")
    response = client.get("get", headers={"X-Demo": "1"}, user_agent="xfer-demo").send()
    print(f"→ Content-Type: {response.get_header('content-type')}")
    head = client.head("get").send()
    print(f"→ HEAD returned {len(head.body)} body bytes")

    log_section("Step 2: POST fields")
    response = client.post("post", body="order_id=1001&amount=149.99").send()
    print(response.text[:200])

    log_section("Step 3: PUT a local stream")
    payload = io.BytesIO(b"*" * 4096)
    response = client.put("put", body=payload).send()
    print(f"→ Uploaded {payload.tell()} bytes, server answered {response.status}")

    log_section("Step 4: Redirects")
    request = client.get("redirect/2")
    print(f"→ Following: status {request.send().status}")
    request.reset().follow_redirects(False)
    print(f"→ Not following: status {request.send().status}")

    log_section("Step 5: Failure handling")
    result = client.send_safe(client.get("http://127.0.0.1:9/"))
    print(f"→ ok={result.ok} error={type(result.error).__name__}")

    if FTP_URL:
        log_section("Step 6: FTP listing")
        listing = client.get(FTP_URL).send()
        print(listing.text)


if __name__ == "__main__":
    main()

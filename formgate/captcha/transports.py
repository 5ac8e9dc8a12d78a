# SPDX-License-Identifier: Apache-2.0
"""
Delivery mechanisms for the verification request.

Three strategies are available, in order of preference: a direct URL fetch
through ``urllib``, the pooled per-thread ``requests.Session`` and a raw POST
over a TLS socket. Which one is used is decided once, when the configuration
is loaded, by probing what the runtime provides.
"""

import collections
import http.client
import importlib.util
import socket
import urllib.parse
import urllib.request

import requests

from pyramid.path import DottedNameResolver
from pyramid.settings import asbool
from zope.interface import implementer

from . import CaptchaError
from .interfaces import ITransport

TRANSPORT_CHECK = "urlopen, requests or ssl transport available"

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"}

Capabilities = collections.namedtuple(
    "Capabilities", ("url_fetch", "http_client", "secure_socket")
)


class TransportError(CaptchaError):
    pass


class TransportUnavailable(TransportError):
    pass


def _encode(body):
    return urllib.parse.urlencode(body).encode("utf-8")


@implementer(ITransport)
class URLFetchTransport:
    name = "urlopen"

    @classmethod
    def create(cls, request):
        return cls()

    def post(self, url, body, *, timeout):
        req = urllib.request.Request(
            url, data=_encode(body), headers=FORM_HEADERS, method="POST"
        )
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return resp.read()
        # HTTPError (non-2xx), URLError and socket timeouts are all OSErrors.
        except (OSError, http.client.HTTPException) as err:
            raise TransportError(str(err)) from err


@implementer(ITransport)
class SessionTransport:
    name = "requests"

    def __init__(self, request):
        self.request = request

    @classmethod
    def create(cls, request):
        return cls(request)

    def post(self, url, body, *, timeout):
        # request.http is reified, so the thread local session is only looked
        # up once a verification is actually attempted.
        try:
            resp = self.request.http.post(
                url, _encode(body), headers=FORM_HEADERS, timeout=timeout
            )
            resp.raise_for_status()
        except (requests.RequestException, OSError) as err:
            raise TransportError(str(err)) from err
        return resp.content


@implementer(ITransport)
class SocketTransport:
    name = "socket"

    @classmethod
    def create(cls, request):
        return cls()

    def post(self, url, body, *, timeout):
        import ssl

        parts = urllib.parse.urlsplit(url)
        if parts.scheme != "https":
            raise TransportError(f"Unsupported scheme for socket transport: {url}")

        host = parts.hostname
        port = parts.port or 443
        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"

        data = _encode(body)
        head = (
            f"POST {path} HTTP/1.0\r\n"
            f"Host: {host}\r\n"
            f"Content-Type: {FORM_HEADERS['Content-Type']}\r\n"
            f"Content-Length: {len(data)}\r\n"
            "Connection: close\r\n"
            "\r\n"
        )

        context = ssl.create_default_context()
        try:
            with socket.create_connection((host, port), timeout=timeout) as sock:
                with context.wrap_socket(sock, server_hostname=host) as tls:
                    tls.sendall(head.encode("ascii") + data)
                    chunks = []
                    while chunk := tls.recv(8192):
                        chunks.append(chunk)
        except OSError as err:
            raise TransportError(str(err)) from err

        return parse_http_response(b"".join(chunks))


def parse_http_response(raw):
    """
    Split a raw HTTP/1.0 response, returning the body when the status is 2xx.
    """
    head, sep, payload = raw.partition(b"\r\n\r\n")
    if not sep:
        raise TransportError("Malformed HTTP response from verification endpoint")

    status_line = head.split(b"\r\n", 1)[0]
    try:
        status = int(status_line.split(b" ", 2)[1])
    except (IndexError, ValueError) as e:
        raise TransportError(f"Malformed HTTP status line: {status_line!r}") from e

    if not 200 <= status < 300:
        raise TransportError(f"Unexpected HTTP status: {status}")

    return payload


# The order of this list is the order of preference.
TRANSPORTS = [
    ("url_fetch", URLFetchTransport),
    ("http_client", SessionTransport),
    ("secure_socket", SocketTransport),
]


def probe_capabilities(settings):
    """
    Inspect, without side effects, which transports this runtime can use.

    requests is a hard dependency of formgate, so the pooled session is always
    available. Only URL fetching and the TLS socket depend on the runtime.
    """
    secure_socket = importlib.util.find_spec("ssl") is not None
    return Capabilities(
        # The verification endpoint is https only.
        url_fetch=secure_socket
        and asbool(settings.get("captcha.allow_url_fetch", True)),
        http_client=True,
        secure_socket=secure_socket,
    )


def select_transport(capabilities):
    for capability, transport_class in TRANSPORTS:
        if getattr(capabilities, capability):
            return transport_class
    return None


def resolve_transport(settings, maybe_dotted=None):
    if override := settings.get("captcha.transport"):
        if maybe_dotted is None:
            maybe_dotted = DottedNameResolver().maybe_resolve
        return maybe_dotted(override)
    return select_transport(probe_capabilities(settings))


def dependency_check(settings):
    capabilities = probe_capabilities(settings)
    return {
        "URL fetch permitted": capabilities.url_fetch,
        "pooled session available": capabilities.http_client,
        "ssl module available": capabilities.secure_socket,
        TRANSPORT_CHECK: resolve_transport(settings) is not None,
    }

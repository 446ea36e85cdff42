"""The web page and request handling served while in setup (access point) mode."""

from __future__ import annotations

import json
import logging
import os
import posixpath
from collections.abc import Iterable, Iterator
from email import policy
from email.parser import BytesParser
from html import escape
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import NamedTuple
from urllib.parse import parse_qs, urlsplit

from .wifi_config import WiFiConfig
from .wifi_network import WiFiBackend, WiFiNetwork

log = logging.getLogger(__name__)

HTML_TYPE = "text/html; charset=utf-8"
JSON_TYPE = "application/json"

DEVICE_NAME = "E-Reader"


def _message_page(heading: str, *parts: str) -> str:
    return "<html><body><h2>" + heading + "</h2>" + "".join(parts) + "</body></html>"


CONFIG_SAVED_HTML = _message_page(
    "Configuration Saved!",
    "<p>WiFi credentials saved. Device will restart and connect.</p>",
)
MISSING_PARAMETERS_HTML = _message_page("Error", "<p>Missing parameters</p>")
UPLOAD_COMPLETE_HTML = _message_page(
    "Upload Complete",
    "<p>File uploaded successfully!</p>",
    "<a href='/'>Back to main page</a>",
)

_STYLES = {
    "body": "font-family: Arial, sans-serif; margin: 20px; background: #f0f0f0;",
    ".container": "max-width: 600px; margin: 0 auto; background: #fff; "
    "padding: 20px; border-radius: 10px;",
    "h1": "color: #333; text-align: center;",
    ".section": "margin: 20px 0; padding: 15px; border: 1px solid #ddd; border-radius: 5px;",
    "input, select, button": "width: 100%; padding: 10px; margin: 5px 0; "
    "border: 1px solid #ccc; border-radius: 3px;",
    "button": "background: #007cba; color: #fff; cursor: pointer;",
    "button:hover": "background: #005a87;",
    ".network-list": "max-height: 200px; overflow-y: auto;",
    ".network-item": "padding: 10px; border-bottom: 1px solid #eee; cursor: pointer;",
    ".network-item:hover": "background: #f5f5f5;",
    ".upload-area": "border: 2px dashed #ccc; padding: 20px; text-align: center;",
}

_SCRIPT = """
function scanNetworks() {
  fetch('/scan').then(function (r) { return r.json(); }).then(function (data) {
    var list = document.getElementById('networks');
    list.innerHTML = '';
    data.networks.forEach(function (net) {
      var row = document.createElement('div');
      row.className = 'network-item';
      var lock = net.encryption ? '\\u{1F512}' : '\\u{1F513}';
      row.innerHTML = '<strong>' + net.ssid + '</strong> (' + net.rssi + 'dBm) ' + lock;
      row.onclick = function () { document.getElementById('ssid').value = net.ssid; };
      list.appendChild(row);
    });
  }).catch(function (err) { console.error('Scan failed:', err); });
}
window.onload = function () { scanNetworks(); };
"""


def _section(heading: str, body: str) -> str:
    return f"<div class='section'><h3>{heading}</h3>{body}</div>"


def _wifi_section() -> str:
    form = (
        "<form action='/configure' method='post'>"
        "<input type='text' name='ssid' id='ssid' "
        "placeholder='WiFi Network Name (SSID)' required>"
        "<input type='password' name='password' id='password' placeholder='WiFi Password'>"
        "<button type='submit'>Save WiFi Settings</button>"
        "</form>"
    )
    return _section(
        "WiFi Configuration",
        "<button onclick='scanNetworks()'>Scan for Networks</button>"
        "<div id='networks' class='network-list'></div>" + form,
    )


def _upload_section() -> str:
    return _section(
        "File Upload",
        "<div class='upload-area'>"
        "<form action='/upload' method='post' enctype='multipart/form-data'>"
        "<input type='file' name='file' accept='.txt,.epub,.pdf' required>"
        "<button type='submit'>Upload File</button>"
        "</form>"
        "<p><small>Supported formats: TXT, EPUB, PDF</small></p>"
        "</div>",
    )


def _info_section(ip_address: str) -> str:
    rows = {"Device": DEVICE_NAME, "IP Address": escape(ip_address), "Status": "Setup Mode"}
    return _section(
        "Device Info",
        "".join(f"<p><strong>{label}:</strong> {value}</p>" for label, value in rows.items()),
    )


class Response(NamedTuple):
    """An HTTP response produced by the portal."""

    status: int
    content_type: str
    body: bytes


def config_page_html(ip_address: str) -> str:
    """The setup page, showing the device's address."""
    css = "\n".join(f"{selector} {{ {rules} }}" for selector, rules in _STYLES.items())
    title = f"{DEVICE_NAME} Setup"
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        f"<title>{title}</title>\n"
        "<meta name='viewport' content='width=device-width, initial-scale=1'>\n"
        f"<style>\n{css}\n</style>\n"
        "</head>\n<body>\n<div class='container'>\n"
        f"<h1>{title}</h1>\n"
        + _wifi_section()
        + "\n"
        + _upload_section()
        + "\n"
        + _info_section(ip_address)
        + "\n</div>\n"
        f"<script>{_SCRIPT}</script>\n"
        "</body>\n</html>\n"
    )


def scan_results_json(networks: Iterable[WiFiNetwork]) -> str:
    """Scan results as the JSON the setup page expects."""
    document = {
        "networks": [
            {"ssid": network.ssid, "rssi": network.rssi, "encryption": not network.is_open}
            for network in networks
        ]
    }
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def _uploaded_files(body: bytes, content_type: str) -> Iterator[tuple[str, bytes]]:
    header = b"Content-Type: " + content_type.encode("latin-1") + b"\r\n\r\n"
    message = BytesParser(policy=policy.HTTP).parsebytes(header + body)
    if not message.is_multipart():
        return
    for part in message.iter_parts():
        filename = part.get_filename()
        if filename:
            yield filename, part.get_payload(decode=True) or b""


class SetupPortal:
    """Answers the setup page's requests: WiFi credentials, scans and uploads."""

    def __init__(
        self,
        config: WiFiConfig,
        backend: WiFiBackend,
        upload_dir: str | os.PathLike[str],
    ) -> None:
        self.config = config
        self.backend = backend
        self.upload_dir = Path(upload_dir)
        self.restart_requested = False
        self.uploaded: list[Path] = []

    def _page(self) -> Response:
        html = config_page_html(self.backend.access_point_ip)
        return Response(200, HTML_TYPE, html.encode("utf-8"))

    def _configure(self, body: bytes) -> Response:
        fields = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
        if "ssid" not in fields or "password" not in fields:
            return Response(400, HTML_TYPE, MISSING_PARAMETERS_HTML.encode("utf-8"))
        self.config.remember(fields["ssid"][0], fields["password"][0])
        self.restart_requested = True
        return Response(200, HTML_TYPE, CONFIG_SAVED_HTML.encode("utf-8"))

    def _upload(self, body: bytes, content_type: str) -> Response:
        for filename, data in _uploaded_files(body, content_type):
            name = posixpath.basename(filename.replace("\\", "/"))
            if not name:
                continue
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            target = self.upload_dir / name
            try:
                target.write_bytes(data)
            except OSError as exc:
                log.error("failed to store upload %s: %s", name, exc)
                continue
            self.uploaded.append(target)
            log.info("upload complete: %s (%d bytes)", name, len(data))
        return Response(200, HTML_TYPE, UPLOAD_COMPLETE_HTML.encode("utf-8"))

    def _scan(self) -> Response:
        return Response(200, JSON_TYPE, scan_results_json(self.backend.scan()).encode("utf-8"))

    def handle(self, method: str, path: str, body: bytes = b"", content_type: str = "") -> Response:
        """Answer one request; unknown routes get the setup page."""
        route = urlsplit(path).path
        method = method.upper()
        if method == "POST" and route == "/configure":
            return self._configure(body)
        if method == "POST" and route == "/upload":
            return self._upload(body, content_type)
        if method == "GET" and route == "/scan":
            return self._scan()
        return self._page()

    def build_server(self, host: str, port: int) -> HTTPServer:
        """An HTTP server bound to ``host``:``port`` that answers with this portal."""
        portal = self

        class _Handler(BaseHTTPRequestHandler):
            def _respond(self, method: str) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                response = portal.handle(
                    method, self.path, body, self.headers.get("Content-Type", "")
                )
                self.send_response(response.status)
                self.send_header("Content-Type", response.content_type)
                self.send_header("Content-Length", str(len(response.body)))
                self.end_headers()
                self.wfile.write(response.body)

            def do_GET(self) -> None:
                self._respond("GET")

            def do_POST(self) -> None:
                self._respond("POST")

            def log_message(self, format: str, *args: object) -> None:
                log.debug("portal: " + format, *args)

        return HTTPServer((host, port), _Handler)
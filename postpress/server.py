"""Demo web server for postpress.

Serves a generated site from its output directory, for a quick look before
uploading it somewhere real. It does not rebuild or reload anything.

- Directories are served through their index.html.
- Directory listings and missing paths get a 404, using 404.html when the
  site has one.

Key classes:
- DemoServer: Serves an output directory over HTTP.
"""

from __future__ import annotations

import functools
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import click


def parse_address(address: str) -> tuple[str, int]:
    """Split a "host:port" address.

    Args:
        address: Address such as "127.0.0.1:8080" or ":8080".

    Returns:
        Tuple of host and port.

    Raises:
        click.BadParameter: If the port is missing or not a number.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise click.BadParameter(f"expected host:port, got {address!r}")
    return host.strip("[]"), int(port)


class _StaticHandler(SimpleHTTPRequestHandler):
    """Request handler for a generated site.

    Directory listings are never produced; a directory without an index.html
    is reported as missing.
    """

    def list_directory(self, path):  # pragma: no cover - send_head answers first
        return self._not_found()

    def _not_found(self):
        page = Path(self.directory) / "404.html"
        if not page.is_file():
            self.send_error(404, "File not found")
            return None
        body = page.read_bytes()
        self.send_response(404)
        self.send_header("Content-type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)
        return None

    def send_head(self):
        target = Path(self.translate_path(self.path))
        if target.is_dir():
            target = target / "index.html"
        if not target.is_file():
            return self._not_found()
        return super().send_head()


class DemoServer:
    """Serves a generated site over HTTP.

    Attributes:
        directory: Directory to serve.
        host: Host to listen on.
        port: Port to listen on.
    """

    def __init__(self, directory: Path, address: str):
        self.directory = directory
        self.host, self.port = parse_address(address)

    def make_server(self) -> ThreadingHTTPServer:
        handler = functools.partial(_StaticHandler, directory=str(self.directory))
        return ThreadingHTTPServer((self.host, self.port), handler)

    def start(self) -> None:  # pragma: no cover - integration path
        httpd = self.make_server()
        click.echo(f"Running on http://{self.host or 'localhost'}:{self.port}")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            httpd.server_close()

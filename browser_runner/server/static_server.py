"""Static file server for browser runs.

Serves the harness page, the test framework, the bootstrap script, and the
suite's source, helper and spec files from a background thread.

Routes:
- GET /                               - Harness page
- GET /__framework__/<path>           - Files under frameworkDir
- GET /__src__/<path>                 - Files under srcDir
- GET /__spec__/<path>                - Files under specDir
- GET /__browser_runner__/bootstrap.js - In-page bootstrap
"""

import logging
import mimetypes
import threading
from functools import partial
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

from ..config.schema import DEFAULT_PORT, RunOptions
from .harness import (
    BOOTSTRAP_JS,
    BOOTSTRAP_PATH,
    FRAMEWORK_PREFIX,
    SPEC_PREFIX,
    SRC_PREFIX,
    render_harness_page,
)

logger = logging.getLogger("browser_runner.server")


def _is_url(pattern: str) -> bool:
    return pattern.startswith(("http://", "https://", "//"))


def expand_patterns(root: Path, patterns: list[str], exclude: Optional[set] = None) -> list[str]:
    """Expand glob patterns into sorted, de-duplicated relative paths.

    Absolute URLs pass through unchanged, in their configured position.
    Patterns starting with "!" remove matches.
    """
    results: list[str] = []
    excluded: set[str] = set(exclude or ())

    for pattern in patterns:
        if pattern.startswith("!"):
            excluded.update(
                p.relative_to(root).as_posix() for p in root.glob(pattern[1:]) if p.is_file()
            )
            continue
        if _is_url(pattern):
            results.append(pattern)
            continue
        if not root.is_dir():
            continue
        for match in sorted(p for p in root.glob(pattern) if p.is_file()):
            rel = match.relative_to(root).as_posix()
            if rel not in results:
                results.append(rel)

    return [r for r in results if r not in excluded]


class Server:
    """Serves a suite to the browser.

    One Server belongs to one run or one serve session; start() and stop()
    are each called once.
    """

    def __init__(self, options: Optional[RunOptions] = None):
        """Initialize the server.

        Args:
            options: Run options naming file roots and patterns.
        """
        self.options = options or RunOptions()
        base_dir = Path(self.options.base_dir or ".")
        self.src_root = (base_dir / self.options.src_dir).resolve()
        self.spec_root = (base_dir / self.options.spec_dir).resolve()
        self.framework_root = (
            (base_dir / self.options.framework_dir).resolve()
            if self.options.framework_dir
            else None
        )
        self._httpd: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    def start(self, port: Optional[int] = None) -> "Server":
        """Bind and start serving in a background thread.

        Args:
            port: Port to bind. 0 picks a free port. Defaults to the
                configured port, or 8888.

        Returns:
            This server.

        Raises:
            OSError: If the address cannot be bound.
        """
        if port is None:
            port = self.options.port if self.options.port is not None else DEFAULT_PORT

        handler = partial(_RequestHandler, self)
        self._httpd = ThreadingHTTPServer((self.options.hostname, port), handler)
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(
            target=self._httpd.serve_forever,
            name="browser-runner-server",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Serving %s on port %d", self.spec_root, self.port())
        return self

    def port(self) -> int:
        """The bound port. Only valid after start()."""
        if self._httpd is None:
            raise RuntimeError("Server is not started")
        return self._httpd.server_address[1]

    def url(self) -> str:
        """Harness page URL."""
        return f"http://{self.options.hostname}:{self.port()}/"

    def stop(self) -> None:
        """Stop serving and release the socket."""
        if self._httpd is None:
            return
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join()
        self._httpd = None
        self._thread = None
        logger.debug("Server stopped")

    def __enter__(self):
        return self.start()

    def __exit__(self, *args):
        self.stop()

    def harness_page(self) -> str:
        """Render the harness page for the current files on disk."""
        opts = self.options
        helpers = expand_patterns(self.spec_root, opts.helpers)
        specs = expand_patterns(self.spec_root, opts.spec_files, exclude=set(helpers))
        srcs = expand_patterns(self.src_root, opts.src_files)

        return render_harness_page(
            framework_styles=[self._url(FRAMEWORK_PREFIX, s) for s in opts.framework_styles],
            framework_scripts=[self._url(FRAMEWORK_PREFIX, s) for s in opts.framework_scripts],
            helper_urls=[self._url(SPEC_PREFIX, h) for h in helpers],
            src_urls=[self._url(SRC_PREFIX, s) for s in srcs],
            spec_urls=[self._url(SPEC_PREFIX, s) for s in specs],
        )

    @staticmethod
    def _url(prefix: str, path: str) -> str:
        return path if _is_url(path) else prefix + path

    def resolve_file(self, request_path: str) -> Optional[Path]:
        """Map a request path to a file inside one of the served roots.

        Returns:
            The file path, or None when the path is unknown or escapes its root.
        """
        roots = [(SRC_PREFIX, self.src_root), (SPEC_PREFIX, self.spec_root)]
        if self.framework_root is not None:
            roots.append((FRAMEWORK_PREFIX, self.framework_root))

        for prefix, root in roots:
            if not request_path.startswith(prefix):
                continue
            candidate = (root / request_path[len(prefix):]).resolve()
            if not candidate.is_relative_to(root) or not candidate.is_file():
                return None
            return candidate
        return None


class _RequestHandler(BaseHTTPRequestHandler):
    server_version = "browser-runner"

    def __init__(self, owner: Server, *args, **kwargs):
        self.owner = owner
        super().__init__(*args, **kwargs)

    def do_GET(self):
        path = unquote(urlsplit(self.path).path)

        if path in ("/", "/index.html"):
            self._send(200, "text/html; charset=utf-8", self.owner.harness_page().encode("utf-8"))
            return

        if path == BOOTSTRAP_PATH:
            self._send(200, "application/javascript; charset=utf-8", BOOTSTRAP_JS.encode("utf-8"))
            return

        file_path = self.owner.resolve_file(path)
        if file_path is None:
            self._send(404, "text/plain; charset=utf-8", b"Not found")
            return

        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        self._send(200, content_type, file_path.read_bytes())

    def _send(self, status: int, content_type: str, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-cache")
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)

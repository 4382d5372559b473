"""Serve the static site build over local HTTP while PDFs are printed.

Rendered pages reference their stylesheets, scripts, and images with
site-absolute URLs, so the print engine needs a server that answers under the
site base URL. Extra directories (for example shared assets living beside the
build) can be mounted under their own URL prefixes.
"""

from __future__ import annotations

import functools
import logging
import posixpath
import threading
import typing as typ
import urllib.parse
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path
    from types import TracebackType

    from .config import ExtraPath

logger = logging.getLogger(__name__)


class _MountedRequestHandler(SimpleHTTPRequestHandler):
    """Map URL prefixes onto local directories, longest prefix first."""

    def __init__(
        self,
        *args: typ.Any,  # noqa: ANN401
        mounts: cabc.Sequence[tuple[str, Path]],
        directory: str,
        **kwargs: typ.Any,  # noqa: ANN401
    ) -> None:
        self.mounts = mounts
        super().__init__(*args, directory=directory, **kwargs)

    def translate_path(self, path: str) -> str:
        url_path = urllib.parse.unquote(path.split("?", 1)[0].split("#", 1)[0])
        trailing_slash = url_path.endswith("/")
        url_path = posixpath.normpath(url_path)
        for prefix, root in self.mounts:
            if url_path != prefix.rstrip("/") and not url_path.startswith(prefix):
                continue
            relative = url_path[len(prefix) :]
            target = root.joinpath(*[part for part in relative.split("/") if part])
            return f"{target}/" if trailing_slash else str(target)
        return super().translate_path(path)

    def log_message(self, format: str, *args: typ.Any) -> None:  # noqa: A002, ANN401
        logger.debug(format, *args)


class StaticSiteServer:
    """Context manager running a threaded HTTP server on a free local port.

    Examples
    --------
    >>> with StaticSiteServer(Path("build"), base_url="/") as server:  # doctest: +SKIP
    ...     server.site_address
    'http://127.0.0.1:53817/'
    """

    def __init__(
        self,
        build_dir: Path,
        *,
        base_url: str = "/",
        extra_paths: cabc.Sequence[ExtraPath] = (),
        host: str = "127.0.0.1",
    ) -> None:
        self.build_dir = build_dir
        self.base_url = base_url
        self.host = host
        mounts = [(extra.server_path, extra.local_path) for extra in extra_paths]
        mounts.append((base_url, build_dir))
        self.mounts = sorted(mounts, key=lambda mount: len(mount[0]), reverse=True)
        self._httpd: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        """Return the bound port; only valid while the server runs."""
        if self._httpd is None:
            msg = "Server is not running."
            raise RuntimeError(msg)
        return int(self._httpd.server_address[1])

    @property
    def origin(self) -> str:
        """Return ``http://host:port`` of the running server."""
        return f"http://{self.host}:{self.port}"

    @property
    def site_address(self) -> str:
        """Return the URL of the site root under the base URL."""
        return f"{self.origin}{self.base_url}"

    def start(self) -> None:
        """Bind a free port and serve requests from a daemon thread."""
        handler = functools.partial(
            _MountedRequestHandler, mounts=self.mounts, directory=str(self.build_dir)
        )
        self._httpd = ThreadingHTTPServer((self.host, 0), handler)
        self._thread = threading.Thread(
            target=self._httpd.serve_forever, name="navpdf-server", daemon=True
        )
        self._thread.start()
        logger.info("Server started at %s", self.site_address)

    def stop(self) -> None:
        """Shut the server down and release its socket."""
        if self._httpd is None:
            return
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join()
        self._httpd = None
        self._thread = None

    def __enter__(self) -> StaticSiteServer:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()


__all__ = ["StaticSiteServer"]

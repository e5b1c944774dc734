"""Static file serving.

Resolves the request path to a file under a root directory and answers
with its bytes. Every failure (missing file, permission denied, a
directory, a path escaping the root) collapses into the same ``404``.
The handler always answers; it never calls ``next``.
"""

import logging
import mimetypes
from pathlib import Path

import anyio

from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.routing.dispatcher import Next

logger = logging.getLogger("sparrow.static")

NOT_FOUND_BODY = "<h1>404 Not Found</h1>"


class StaticFiles:
    """Handler that serves files from a directory.

    The full request path is looked up under the root; ``/`` maps to the
    index file.

    Usage::

        app.use(static("./public"))
        app.use("/assets", StaticFiles("./public", index="home.html"))
    """

    __slots__ = ("_directory", "_index")

    def __init__(self, directory: str | Path, *, index: str = "index.html") -> None:
        self._directory = Path(directory).resolve()
        self._index = index

    @property
    def directory(self) -> Path:
        return self._directory

    def resolve(self, path: str) -> Path | None:
        """Map a request path to a file path.

        ``None`` when the path escapes the root or cannot name a file at
        all (an embedded NUL byte, for instance).
        """
        if path == "/":
            return self._directory / self._index
        try:
            candidate = (self._directory / path.lstrip("/")).resolve()
        except (OSError, ValueError):
            return None
        if not candidate.is_relative_to(self._directory):
            return None
        return candidate

    async def __call__(self, request: Request, response: Response, next: Next) -> None:
        file_path = self.resolve(request.path)
        if file_path is None:
            logger.debug("Refusing %r: not a path under %s", request.path, self._directory)
            await self._not_found(response)
            return

        try:
            body = await anyio.Path(file_path).read_bytes()
        except (OSError, ValueError) as exc:
            logger.debug("Cannot read %s: %s", file_path, exc)
            await self._not_found(response)
            return

        content_type, _ = mimetypes.guess_type(str(file_path))
        response.write_head(200, {"content-type": content_type or "application/octet-stream"})
        await response.end(body)

    async def _not_found(self, response: Response) -> None:
        response.write_head(404, {"content-type": "text/html; charset=utf-8"})
        await response.end(NOT_FOUND_BODY)


def static(root: str | Path, *, index: str = "index.html") -> StaticFiles:
    """Build a static-file handler for *root*."""
    return StaticFiles(root, index=index)

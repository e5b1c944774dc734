"""View engine resolution and rendering.

The ``view_engine`` setting names the engine. ``"kida"`` is built in;
any other name is imported as a module exposing::

    def render_file(full_path: str, data: Mapping, options: Mapping) -> str

(``async def`` works too). Sync engines run in a worker thread so a slow
template never blocks the event loop.
"""

import importlib
import inspect
import threading
from collections.abc import Mapping
from functools import partial
from pathlib import Path
from typing import Any, Protocol

import anyio
from kida import Environment, FileSystemLoader

from sparrow.config import AppConfig
from sparrow.errors import ConfigurationError


class ViewEngine(Protocol):
    """Anything that can turn a template file plus data into a string."""

    def render_file(
        self,
        full_path: str,
        data: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> Any: ...


class KidaEngine:
    """Render templates with kida.

    One ``Environment`` per views root, created on first use and reused,
    so ``{% extends %}`` and ``{% include %}`` resolve against the views
    directory rather than the template's own folder. ``options`` are
    passed to ``Environment`` (e.g. ``autoescape``).
    """

    __slots__ = ("_environments", "_lock", "_root")

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._environments: dict[tuple[str, tuple[tuple[str, Any], ...]], Environment] = {}
        self._lock = threading.Lock()

    def render_file(
        self,
        full_path: str,
        data: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> str:
        path = Path(full_path)
        if path.is_relative_to(self._root):
            root, name = self._root, path.relative_to(self._root).as_posix()
        else:
            root, name = path.parent, path.name
        env = self._environment(root, options)
        return env.get_template(name).render(dict(data))

    def _environment(self, root: Path, options: Mapping[str, Any]) -> Environment:
        key = (str(root), tuple(sorted(options.items())))
        with self._lock:
            env = self._environments.get(key)
            if env is None:
                settings = {"autoescape": True, **options}
                env = Environment(loader=FileSystemLoader(str(root)), **settings)
                self._environments[key] = env
            return env


def resolve_engine(name: str, views: str | Path) -> ViewEngine:
    """Resolve the ``view_engine`` setting to an engine object.

    Raises ``ConfigurationError`` if the module cannot be imported or does
    not provide ``render_file``.
    """
    if name == "kida":
        return KidaEngine(views)
    try:
        module = importlib.import_module(name)
    except ImportError as exc:
        msg = f"View engine {name!r} could not be imported: {exc}"
        raise ConfigurationError(msg) from exc
    if not callable(getattr(module, "render_file", None)):
        msg = f"View engine {name!r} does not provide a render_file(full_path, data, options) function."
        raise ConfigurationError(msg)
    return module


class TemplateRenderer:
    """Binds the ``views`` and ``view_engine`` settings to a render call.

    Created once when the app freezes. The engine itself is resolved on
    the first render so a missing engine surfaces as a failed render
    (``503``) rather than a crashed startup.
    """

    __slots__ = ("_engine", "_engine_name", "_lock", "_views")

    def __init__(self, config: AppConfig) -> None:
        self._views = Path(config.views)
        self._engine_name = config.view_engine
        self._engine: ViewEngine | None = None
        self._lock = threading.Lock()

    @property
    def views(self) -> Path:
        return self._views

    def engine(self) -> ViewEngine:
        with self._lock:
            if self._engine is None:
                self._engine = resolve_engine(self._engine_name, self._views)
            return self._engine

    async def render(
        self,
        template: str,
        data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> str:
        """Render *template* (relative to the views directory) to a string."""
        engine = self.engine()
        full_path = str(self._views / template)
        render_file = engine.render_file
        if inspect.iscoroutinefunction(render_file):
            return await render_file(full_path, data, options or {})
        result = await anyio.to_thread.run_sync(
            partial(render_file, full_path, data, options or {})
        )
        if inspect.isawaitable(result):
            result = await result
        return result

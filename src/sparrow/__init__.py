"""Sparrow — a minimal ASGI framework built around one ordered handler chain.

Middleware and routes live in the same table and run in registration
order; every handler decides whether the chain continues.

Basic usage::

    from sparrow import App, RequestLogger

    app = App()
    app.use(RequestLogger())

    @app.get("/ping")
    async def ping(request, response, next):
        await response.send("pong")

Serve it with any ASGI server (``app`` is the ASGI callable).
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "FaultPolicy",
    "Middleware",
    "Next",
    "Request",
    "RequestLogger",
    "Response",
    "ResponseStateError",
    "ResponseTypeError",
    "SparrowError",
    "StaticFiles",
    "static",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sparrow`` fast while providing a clean top-level API.
    """
    if name == "App":
        from sparrow.app import App

        return App

    if name in ("AppConfig", "FaultPolicy"):
        from sparrow import config as _config

        return getattr(_config, name)

    if name == "Request":
        from sparrow.http.request import Request

        return Request

    if name == "Response":
        from sparrow.http.response import Response

        return Response

    if name == "Next":
        from sparrow.routing.dispatcher import Next

        return Next

    if name in ("Middleware", "RequestLogger", "StaticFiles", "static"):
        from sparrow import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "ResponseStateError",
        "ResponseTypeError",
        "SparrowError",
    ):
        from sparrow import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""Hello World — the simplest sparrow app.

Demonstrates exact-path routes, what ``send()`` does with each value
type, a regex route and a catch-all fallback at the end of the chain.

Run with any ASGI server, for example::

    uvicorn app:app
"""

import re

from sparrow import App

app = App()


@app.get("/")
async def index(request, response, next):
    await response.send("Hello, World!")


@app.get(re.compile(r"^/greet/[^/]+$"))
async def greet(request, response, next):
    name = request.path.rsplit("/", 1)[-1]
    await response.send(f"Hello, {name}!")


@app.get("/api/status")
async def status(request, response, next):
    await response.send({"status": "ok", "version": "0.1.0"})


@app.get("/answer")
async def answer(request, response, next):
    await response.send(42)


@app.post("/custom")
async def custom(request, response, next):
    response.write_head(201, {"X-Custom": "sparrow"})
    await response.send("Created")


@app.use
async def not_found(request, response, next):
    response.status = 404
    await response.send(f"Nothing at {request.path}")

"""Server-side plumbing: ASGI message sending and fault handling."""

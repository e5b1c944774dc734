"""HTTP primitives: decorated request, writable response, URL parsing."""

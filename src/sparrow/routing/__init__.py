"""Routing — ordered route table walked by a per-request dispatcher.

Middleware and routes share one table. Registration appends; dispatch
reads in insertion order and lets each handler decide whether the walk
continues.
"""

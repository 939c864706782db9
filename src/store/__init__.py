"""Sandboxed persistence layer.

This package exposes file and directory primitives over an isolated
per-application storage area, with directory and in-memory backends.
"""

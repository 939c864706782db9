"""Core configuration, errors, logging, and shared types.

This package holds the cross-cutting pieces every isostore layer uses.
"""

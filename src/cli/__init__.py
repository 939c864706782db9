"""Command-line interface for inspecting and editing a sandbox."""

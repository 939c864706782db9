"""Open-mode translation for output streams.

This module maps each ``FileMode`` onto backend-neutral open semantics.
Values outside the enumeration are rejected before any backend call.
"""

from __future__ import annotations

from core.errors import SandboxArgumentError
from core.types import FileMode, OpenSemantics

_OPEN_SEMANTICS: dict[FileMode, OpenSemantics] = {
    FileMode.APPEND: OpenSemantics(create=True, append=True),
    FileMode.CREATE: OpenSemantics(create=True, truncate=True),
    FileMode.CREATE_NEW: OpenSemantics(create=True, must_not_exist=True),
    FileMode.OPEN: OpenSemantics(must_exist=True),
    FileMode.OPEN_OR_CREATE: OpenSemantics(create=True),
    FileMode.TRUNCATE: OpenSemantics(must_exist=True, truncate=True),
}

INPUT_SEMANTICS = OpenSemantics(must_exist=True)


def resolve_open_semantics(mode: object) -> OpenSemantics:
    """Translate an output-stream mode into open semantics.

    Args:
        mode: Requested file mode.

    Returns:
        Semantics the backend must honor.

    Raises:
        SandboxArgumentError: If ``mode`` is not a ``FileMode`` member.
    """
    if not isinstance(mode, FileMode):
        raise SandboxArgumentError(
            f"Invalid file mode: {mode!r}. "
            f"Use one of: {', '.join(member.name for member in FileMode)}."
        )
    return _OPEN_SEMANTICS[mode]


def parse_file_mode(name: str) -> FileMode:
    """Parse a user-supplied file mode name.

    Accepts member names and values in any case, with ``-`` or ``_``
    separators, and the CamelCase spelling (``CreateNew``).

    Raises:
        SandboxArgumentError: If name matches no file mode.
    """
    normalized = name.strip().replace("-", "").replace("_", "").lower()
    for member in FileMode:
        if member.name.replace("_", "").lower() == normalized:
            return member
    raise SandboxArgumentError(
        f"Unknown file mode '{name}'. "
        f"Use one of: {', '.join(member.name for member in FileMode)}."
    )


def supported_file_modes() -> tuple[str, ...]:
    """Return file mode names accepted by ``parse_file_mode``."""
    return tuple(member.name for member in FileMode)

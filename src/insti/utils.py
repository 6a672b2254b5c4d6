"""Small helpers shared by the settings layer and the resource operations."""

import os
import re

_PERCENT_VARIABLE = re.compile(r"%([^%]+)%")


def expand_environment(value: str) -> str:
    """Expand environment references in a path-like string.

    Handles Windows style ``%NAME%`` references (manifests are usually
    written on Windows) as well as ``$NAME``/``${NAME}`` and a leading ``~``.
    Unknown ``%NAME%`` references are left untouched.

    Args:
        value: Raw string as written in a manifest or settings file

    Returns:
        Expanded string

    """
    if "%" in value:
        value = _PERCENT_VARIABLE.sub(
            lambda match: os.environ.get(match.group(1), match.group(0)),
            value,
        )
    return os.path.expanduser(os.path.expandvars(value))


def split_csv(value: str) -> list[str]:
    """Split a comma separated settings value, dropping empty parts."""
    return [part.strip() for part in value.split(",") if part.strip()]

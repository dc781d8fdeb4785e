from __future__ import annotations


class ConfigrError(RuntimeError):
    """Base class for errors raised by the settings pane engine."""


class PathError(ConfigrError):
    """Raised when a path cannot be parsed or cannot be written to."""


class MalformedChildError(ConfigrError):
    """Raised when a container is given something that is not a pane node."""


class NestedSubPageError(ConfigrError):
    """Raised when a subpage is declared beneath another subpage."""


class ShadowKeyCollisionError(ConfigrError):
    """Raised when two distinct paths mangle to the same shadow key."""

    def __init__(self, key: str, existing_path: str, new_path: str) -> None:
        super().__init__(
            f"Shadow key '{key}' is already used by '{existing_path}'; "
            f"'{new_path}' cannot share it."
        )
        self.key = key
        self.existing_path = existing_path
        self.new_path = new_path

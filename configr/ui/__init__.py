"""Qt widgets that render a settings session."""

from .configr_pane import ConfigrPane
from .content_pane import ContentPane

__all__ = [
    "ConfigrPane",
    "ContentPane",
]

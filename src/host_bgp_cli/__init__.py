"""host-bgp command line runtime."""

from .config import ToolConfig, load_config  # noqa: F401

__all__ = [
    "ToolConfig",
    "load_config",
]

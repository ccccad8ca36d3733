"""
Structured logging for the Metaplex SDK.

get_logger() in every SDK module; configure_logging() is opt-in for the host.
"""

from metaplex_sdk.mx_logging.logger import bind_operation, configure_logging, get_logger

__all__ = ["bind_operation", "configure_logging", "get_logger"]

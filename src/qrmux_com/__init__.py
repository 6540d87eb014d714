"""QR render and camera scan glue around the qrmux protocol."""

__all__ = [
    "config",
    "qrencode",
    "sender",
    "receiver",
    "cli",
    "logging_setup",
]

"""Small TCP and UDP chat tools: a relay, a duplex chat, an echo chat and one-shot messages."""

__version__ = "0.1.0"
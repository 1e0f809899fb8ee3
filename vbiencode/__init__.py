"""Encoders for WSS, VITC and Videocrypt S vertical-blanking data."""

__version__ = "0.1.0"
__all__ = ["wss", "vitc", "videocrypts"]
"""
Codecs — Discovered by EncoderRegistry.scan(); add a module here to add codecs.
"""

from .base import Codec

__all__ = ['Codec']

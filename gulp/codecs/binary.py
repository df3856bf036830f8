"""
Byte-oriented codecs (UTF-8 text in, printable text out).
"""

import base64
import binascii

from .base import Codec


class Base64Codec(Codec):
    name = "base64"
    description = "RFC 4648 base64"

    def encode(self, text: str) -> str:
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    def decode(self, text: str) -> str:
        try:
            return base64.b64decode(text, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError(f"invalid base64 input: {e}") from e


class HexCodec(Codec):
    name = "hex"
    description = "Lowercase hexadecimal bytes"

    def encode(self, text: str) -> str:
        return text.encode("utf-8").hex()

    def decode(self, text: str) -> str:
        try:
            return bytes.fromhex(text).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"invalid hex input: {e}") from e

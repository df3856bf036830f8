"""
Text-level codecs.
"""

import html
from urllib.parse import quote, unquote

from .base import Codec


class URLCodec(Codec):
    name = "url"
    description = "Percent-encoding (all reserved characters)"

    def encode(self, text: str) -> str:
        return quote(text, safe="")

    def decode(self, text: str) -> str:
        return unquote(text)


class HTMLCodec(Codec):
    name = "html"
    description = "HTML entity escaping"

    def encode(self, text: str) -> str:
        return html.escape(text)

    def decode(self, text: str) -> str:
        return html.unescape(text)

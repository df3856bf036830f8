"""
EncoderRegistry — Codecs available to Encode and Decode modes
"""

import logging

from ..codecs.base import Codec
from .plugins import PluginRegistry

logger = logging.getLogger(__name__)


class EncoderRegistry(PluginRegistry[Codec]):
    """Codecs discovered in gulp.codecs."""

    package = "gulp.codecs"
    base = Codec

    def scan(self):
        first = not self.scanned
        plugins = super().scan()
        if first:
            logger.info("Loaded %d codec(s): %s", len(plugins), ", ".join(sorted(plugins)))
        return plugins

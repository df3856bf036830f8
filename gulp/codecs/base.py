"""
Codec — Text transformation used by Encode and Decode modes

Concrete codecs live in sibling modules of this package; the
EncoderRegistry discovers them by scanning gulp.codecs.
"""

from abc import ABC, abstractmethod


class Codec(ABC):
    """Reversible text transformation."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def encode(self, text: str) -> str:
        pass

    @abstractmethod
    def decode(self, text: str) -> str:
        """
        Raises:
            ValueError: If text is not valid input for this codec
        """

"""
Codec commands — encode, decode, codecs

Text is everything after the codec name, rejoined with single spaces.
"""

from typing import TYPE_CHECKING, Optional

from ..codecs.base import Codec
from .base import Command

if TYPE_CHECKING:
    from ..shell.context import CommandContext
    from ..shell.parser import ParsedCommand


class _CodecCommand(Command):
    """Looks up a codec by name in ctx.services.encoders."""

    def _codec(self, name: str, ctx: 'CommandContext') -> Optional[Codec]:
        encoders = ctx.services.encoders
        if encoders is None:
            self.print_error(ctx, "no codecs loaded")
            return None
        codec = encoders.get(name)
        if codec is None:
            self.print_error(ctx, f"unknown codec '{name}'. Available: {', '.join(encoders.names())}")
        return codec


class EncodeCommand(_CodecCommand):
    name = "encode"
    description = "Encode text with a codec"
    usage = "encode <codec> <text...>"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        if len(parsed.args) < 2:
            self.print_usage(ctx)
            return
        codec = self._codec(parsed.args[0], ctx)
        if codec is not None:
            ctx.println(codec.encode(" ".join(parsed.args[1:])))


class DecodeCommand(_CodecCommand):
    name = "decode"
    description = "Decode text with a codec"
    usage = "decode <codec> <text...>"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        if len(parsed.args) < 2:
            self.print_usage(ctx)
            return
        codec = self._codec(parsed.args[0], ctx)
        if codec is None:
            return
        try:
            ctx.println(codec.decode(" ".join(parsed.args[1:])))
        except ValueError as e:
            self.print_error(ctx, str(e))


class CodecsCommand(Command):
    name = "codecs"
    description = "List available codecs"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        encoders = ctx.services.encoders
        codecs = encoders.all() if encoders is not None else []
        if not codecs:
            ctx.println("No codecs loaded")
            return
        width = max(len(c.name) for c in codecs)
        for codec in codecs:
            ctx.println(f"  {codec.name.ljust(width)}  {codec.description}")

"""
exclude — Shell surface over the ExclusionRuleManager

    exclude list
    exclude add <host|path|endpoint> <pattern...>
    exclude remove <id>
    exclude update <id> <host|path|endpoint> <pattern...>
    exclude clear
    exclude test <method> <url>

Endpoint patterns contain a space ("GET http://..."), so the pattern
is everything after the type.
"""

from typing import TYPE_CHECKING

from ..exclusion import ExclusionRule, ExclusionRuleType
from .base import Command

if TYPE_CHECKING:
    from ..shell.context import CommandContext
    from ..shell.parser import ParsedCommand

SUBCOMMANDS = ("list", "add", "remove", "update", "clear", "test")


class ExcludeCommand(Command):
    name = "exclude"
    description = "Manage exclusion rules (list, add, remove, update, clear, test)"
    usage = "exclude <" + "|".join(SUBCOMMANDS) + "> [args...]"

    def invoke(self, parsed: 'ParsedCommand', ctx: 'CommandContext') -> None:
        action = parsed.arg(0)
        if action not in SUBCOMMANDS:
            self.print_usage(ctx)
            return

        try:
            getattr(self, f"_{action}")(list(parsed.args[1:]), ctx)
        except ValueError as e:
            self.print_error(ctx, str(e))

    def _list(self, args, ctx: 'CommandContext') -> None:
        rules = ctx.services.exclusions.get_rules()
        if not rules:
            ctx.println("No exclusion rules")
            return
        for rule in rules:
            ctx.println(f"{rule.id}  {rule}")

    def _add(self, args, ctx: 'CommandContext') -> None:
        if len(args) < 2:
            raise ValueError("usage: exclude add <type> <pattern>")
        rule = ExclusionRule(type=ExclusionRuleType.from_name(args[0]), pattern=" ".join(args[1:]))
        ctx.services.exclusions.add_rule(rule)
        ctx.println(ctx.style.success(f"Added {rule.id}  {rule}"))

    def _remove(self, args, ctx: 'CommandContext') -> None:
        if len(args) != 1:
            raise ValueError("usage: exclude remove <id>")
        manager = ctx.services.exclusions
        existed = manager.get_rule(args[0]) is not None
        manager.remove_rule(args[0])
        if existed:
            ctx.println(ctx.style.success(f"Removed {args[0]}"))
        else:
            ctx.println(ctx.style.warning(f"No rule with id {args[0]}"))

    def _update(self, args, ctx: 'CommandContext') -> None:
        if len(args) < 3:
            raise ValueError("usage: exclude update <id> <type> <pattern>")
        rule_type = ExclusionRuleType.from_name(args[1])
        if ctx.services.exclusions.update_rule(args[0], rule_type, " ".join(args[2:])):
            ctx.println(ctx.style.success(f"Updated {args[0]}"))
        else:
            ctx.println(ctx.style.warning(f"No rule with id {args[0]}"))

    def _clear(self, args, ctx: 'CommandContext') -> None:
        ctx.services.exclusions.clear_rules()
        ctx.println("Cleared exclusion rules")

    def _test(self, args, ctx: 'CommandContext') -> None:
        if len(args) != 2:
            raise ValueError("usage: exclude test <method> <url>")
        method, url = args[0].upper(), args[1]
        if ctx.services.exclusions.should_exclude(method, url):
            ctx.println(ctx.style.warning(f"{method} {url}: excluded"))
        else:
            ctx.println(f"{method} {url}: not excluded")

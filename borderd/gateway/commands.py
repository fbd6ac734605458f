"""
borderd Gateway Commands

Registers every gateway command with a dispatch table.
"""

from typing import List

from ..rpc.dispatch import CommandDescriptor, DispatchTable, ParamSpec, command
from .context import GatewayContext
from .fields import field_commands
from .topology import topology_commands


def _engine_commands(ctx: GatewayContext) -> List[CommandDescriptor]:
    """Commands served by the context's stateful engines."""
    scanner = ctx.scanner
    diagnostics = ctx.diagnostics
    commissioning = ctx.commissioning

    return [
        command("scan", lambda gw, req: scanner.handle_scan(req)),
        command("networkdata", lambda gw, req: diagnostics.handle_networkdata(req)),
        command("commissionerstart", lambda gw, req: commissioning.handle_start(req)),
        command(
            "joineradd",
            lambda gw, req: commissioning.handle_joiner_add(req),
            ParamSpec("pskd"),
            ParamSpec("eui64"),
        ),
        command(
            "joinerremove",
            lambda gw, req: commissioning.handle_joiner_remove(req),
            ParamSpec("eui64"),
        ),
        command("joinernum", lambda gw, req: commissioning.handle_joiner_num(req)),
        command(
            "mgmtset",
            lambda gw, req: commissioning.handle_mgmtset(req),
            ParamSpec("masterkey"),
            ParamSpec("networkname"),
            ParamSpec("extpanid"),
            ParamSpec("panid"),
            ParamSpec("channel"),
            ParamSpec("pskc"),
        ),
    ]


def build_dispatch_table(ctx: GatewayContext) -> DispatchTable:
    """
    Create the dispatch table for a gateway context.

    Args:
        ctx: Gateway context handed to every handler

    Returns:
        DispatchTable with all gateway commands registered
    """
    table = DispatchTable(ctx)
    table.register_all(field_commands())
    table.register_all(topology_commands())
    table.register_all(_engine_commands(ctx))
    return table

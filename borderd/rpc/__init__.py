"""
borderd RPC Module

Command bus between local clients and the gateway.

Protocol: JSON-RPC 2.0 over a Unix socket; each method is a gateway
command whose result is a reply document.
"""

from .document import DocumentError, ResponseDocument
from .dispatch import (
    CommandDescriptor,
    DispatchTable,
    ParamSpec,
    ParamType,
    RequestContext,
)
from .server import (
    RPCServer,
    RPCClient,
    RPCError,
    RPCErrorCode,
)
from .wake import WakeChannel

__all__ = [
    'CommandDescriptor',
    'DispatchTable',
    'DocumentError',
    'ParamSpec',
    'ParamType',
    'RequestContext',
    'ResponseDocument',
    'RPCServer',
    'RPCClient',
    'RPCError',
    'RPCErrorCode',
    'WakeChannel',
]

"""
borderd Gateway Module

Command handlers between the command bus and the network stack:
- gate.py          : Lock shared with the stack's worker thread
- fields.py        : Generic get/set of configuration fields
- scan.py          : Blocking bridge over the callback-driven scan
- diagnostics.py   : Rate-limited network diagnostic cache
- commissioning.py : Commissioner, joiners and management set
- topology.py      : Neighbors, parent, leader data, role control
"""

from .gate import SyncGate
from .context import GatewayContext
from .commands import build_dispatch_table

__all__ = [
    'SyncGate',
    'GatewayContext',
    'build_dispatch_table',
]

"""
borderd Network Stack Module

Interface to the mesh network stack the gateway fronts.

Stacks:
- simulated: In-process stack with its own worker thread
"""

from .base import (
    CommissionerState,
    Dataset,
    DeviceRole,
    DiagTlvType,
    JoinerEvent,
    LinkMode,
    MacFilterMode,
    NetworkStack,
)
from .simulated import SimulatedStack

__all__ = [
    'NetworkStack',
    'SimulatedStack',
    'CommissionerState',
    'Dataset',
    'DeviceRole',
    'DiagTlvType',
    'JoinerEvent',
    'LinkMode',
    'MacFilterMode',
]

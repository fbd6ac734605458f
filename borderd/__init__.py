"""
borderd - Border Router RPC Gateway

Exposes the control surface of a mesh border-router network stack
to local clients over a JSON-RPC command bus.

This package contains:
- codec.py   : Hex and numeric parameter codecs
- stack/     : Network stack interface and simulated stack
- gateway/   : Command handlers, synchronization gate, async bridges
- rpc/       : Command bus transport, dispatch table, reply documents
- crypto/    : PSKc and joiner id derivation
"""

__version__ = "0.1.0"
__author__ = "borderd Project"

# Core constants
EXT_ADDRESS_SIZE = 8  # bytes
EXT_PAN_ID_SIZE = 8  # bytes
NETWORK_KEY_SIZE = 16  # bytes
PSKC_SIZE = 16  # bytes
NETWORK_NAME_MAX_SIZE = 16  # bytes

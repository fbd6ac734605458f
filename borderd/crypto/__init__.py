"""
borderd Cryptographic Module

Commissioning credential derivations built on python3-cryptography:
- PSKc from passphrase (PBKDF2 / AES-CMAC-PRF-128)
- Joiner id from EUI-64 (SHA-256)
"""

from .pskc import (
    aes_cmac_prf_128,
    compute_pskc,
    compute_joiner_id,
)

__all__ = [
    'aes_cmac_prf_128',
    'compute_pskc',
    'compute_joiner_id',
]

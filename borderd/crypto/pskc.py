"""
borderd Commissioning Credentials

Derivations used around commissioning:
- PSKc from a commissioning passphrase (Thread 1.1, 8.4.1.2.2)
- Joiner id from a joiner's EUI-64

PSKc = PBKDF2(PRF = AES-CMAC-PRF-128, P = passphrase,
              S = "Thread" || extended PAN ID || network name,
              c = 16384, dkLen = 16)

Dependencies:
- python3-cryptography (AES-CMAC, SHA-256)
"""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.cmac import CMAC

from .. import EXT_ADDRESS_SIZE, EXT_PAN_ID_SIZE, NETWORK_NAME_MAX_SIZE, PSKC_SIZE


PSKC_SALT_PREFIX = b"Thread"
PSKC_ITERATIONS = 16384

# AES block / CMAC output size
AES_BLOCK_SIZE = 16

# Locally administered bit of the first joiner id byte
JOINER_ID_LOCAL_BIT = 0x02

# Passphrase length limits (bytes)
PASSPHRASE_MIN_SIZE = 6
PASSPHRASE_MAX_SIZE = 255


def aes_cmac(key: bytes, message: bytes) -> bytes:
    """
    Compute AES-CMAC of a message.

    Args:
        key: 16-byte AES key
        message: Data to authenticate

    Returns:
        bytes: 16-byte tag
    """
    mac = CMAC(algorithms.AES(key))
    mac.update(message)
    return mac.finalize()


def _prf_key(key: bytes) -> bytes:
    """Condense a key that is not exactly 16 bytes with AES-CMAC under the all-zero key."""
    if len(key) != AES_BLOCK_SIZE:
        return aes_cmac(bytes(AES_BLOCK_SIZE), key)
    return key


def aes_cmac_prf_128(key: bytes, message: bytes) -> bytes:
    """AES-CMAC-PRF-128 (RFC 4615)."""
    return aes_cmac(_prf_key(key), message)


def compute_pskc(passphrase: str, network_name: str, ext_pan_id: bytes) -> bytes:
    """
    Derive the PSKc for a network.

    Args:
        passphrase: Commissioning passphrase (6-255 bytes UTF-8)
        network_name: Network name (at most 16 bytes UTF-8)
        ext_pan_id: 8-byte extended PAN ID

    Returns:
        bytes: 16-byte PSKc

    Raises:
        ValueError: If any input has an invalid length
    """
    password = passphrase.encode("utf-8")
    name = network_name.encode("utf-8")

    if not PASSPHRASE_MIN_SIZE <= len(password) <= PASSPHRASE_MAX_SIZE:
        raise ValueError(
            f"Passphrase must be {PASSPHRASE_MIN_SIZE}-{PASSPHRASE_MAX_SIZE} bytes"
        )
    if len(name) > NETWORK_NAME_MAX_SIZE:
        raise ValueError(f"Network name must be at most {NETWORK_NAME_MAX_SIZE} bytes")
    if len(ext_pan_id) != EXT_PAN_ID_SIZE:
        raise ValueError(f"Extended PAN ID must be {EXT_PAN_ID_SIZE} bytes")

    salt = PSKC_SALT_PREFIX + bytes(ext_pan_id) + name

    # The PRF key is the same for every iteration: condense it once
    prf = CMAC(algorithms.AES(_prf_key(password)))

    def prf_block(message: bytes) -> bytes:
        mac = prf.copy()
        mac.update(message)
        return mac.finalize()

    # dkLen equals the PRF output size, so only block 1 is needed
    block = prf_block(salt + (1).to_bytes(4, "big"))
    result = int.from_bytes(block, "big")
    for _ in range(PSKC_ITERATIONS - 1):
        block = prf_block(block)
        result ^= int.from_bytes(block, "big")

    return result.to_bytes(AES_BLOCK_SIZE, "big")[:PSKC_SIZE]


def compute_joiner_id(eui64: bytes) -> bytes:
    """
    Compute a joiner id from its EUI-64.

    The joiner id is the first 8 bytes of SHA-256(EUI-64) with the
    locally administered bit set.

    Args:
        eui64: 8-byte factory EUI-64

    Returns:
        bytes: 8-byte joiner id
    """
    if len(eui64) != EXT_ADDRESS_SIZE:
        raise ValueError(f"EUI-64 must be {EXT_ADDRESS_SIZE} bytes")

    digest = hashes.Hash(hashes.SHA256())
    digest.update(bytes(eui64))
    joiner_id = bytearray(digest.finalize()[:EXT_ADDRESS_SIZE])
    joiner_id[0] |= JOINER_ID_LOCAL_BIT
    return bytes(joiner_id)

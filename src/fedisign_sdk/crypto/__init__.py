"""
Cryptographic operations for fedisign Python SDK
"""

from .rsa import (
    RSA_MIN_KEY_SIZE,
    load_private_key,
    load_public_key,
    sign_message,
    verify_signature,
)

__all__ = [
    'RSA_MIN_KEY_SIZE',
    'load_private_key',
    'load_public_key',
    'sign_message',
    'verify_signature',
]

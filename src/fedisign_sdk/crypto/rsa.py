"""
RSA key handling for fedisign Python SDK

This module loads actor key material and performs the RSASSA-PKCS1-v1_5 /
SHA-256 operations used by HTTP Signatures (``rsa-sha256``).
"""

from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..exceptions import RSAKeyError, ValidationError

# Smallest modulus accepted for signing keys
RSA_MIN_KEY_SIZE = 2048


def _to_bytes(data: Union[str, bytes]) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8')
    return data


def load_private_key(pem: Union[str, bytes], password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key from PEM data.

    Args:
        pem: PEM encoded private key (string or bytes)
        password: Optional passphrase for encrypted keys

    Returns:
        RSAPrivateKey: Loaded private key

    Raises:
        RSAKeyError: If the key cannot be parsed or is not an RSA key
        ValidationError: If the key is too small
    """
    if not pem:
        raise ValidationError("Private key PEM cannot be empty", "INVALID_PRIVATE_KEY")

    try:
        key = serialization.load_pem_private_key(_to_bytes(pem), password=password)
    except (ValueError, TypeError) as e:
        raise RSAKeyError(f"Failed to load private key: {e}", "INVALID_PRIVATE_KEY") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise RSAKeyError(
            f"Expected an RSA private key, got {type(key).__name__}",
            "INVALID_PRIVATE_KEY_TYPE"
        )

    if key.key_size < RSA_MIN_KEY_SIZE:
        raise ValidationError(
            f"RSA key must be at least {RSA_MIN_KEY_SIZE} bits, got {key.key_size}",
            "INVALID_PRIVATE_KEY_SIZE"
        )

    return key


def load_public_key(pem: Union[str, bytes]) -> rsa.RSAPublicKey:
    """
    Load an RSA public key from PEM data.

    Args:
        pem: PEM encoded public key (string or bytes)

    Returns:
        RSAPublicKey: Loaded public key

    Raises:
        RSAKeyError: If the key cannot be parsed or is not an RSA key
    """
    try:
        key = serialization.load_pem_public_key(_to_bytes(pem))
    except (ValueError, TypeError) as e:
        raise RSAKeyError(f"Failed to load public key: {e}", "INVALID_PUBLIC_KEY") from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise RSAKeyError(
            f"Expected an RSA public key, got {type(key).__name__}",
            "INVALID_PUBLIC_KEY_TYPE"
        )

    return key


def sign_message(private_key: rsa.RSAPrivateKey, message: Union[str, bytes]) -> bytes:
    """
    Sign a message with RSASSA-PKCS1-v1_5 over SHA-256.

    Args:
        private_key: RSA private key
        message: Message to sign (string or bytes)

    Returns:
        bytes: Raw signature bytes

    Raises:
        RSAKeyError: If signing fails
    """
    try:
        return private_key.sign(_to_bytes(message), padding.PKCS1v15(), hashes.SHA256())
    except Exception as e:
        raise RSAKeyError(f"Message signing failed: {e}", "SIGNING_FAILED") from e


def verify_signature(
    public_key: rsa.RSAPublicKey,
    message: Union[str, bytes],
    signature: bytes
) -> bool:
    """
    Verify an RSASSA-PKCS1-v1_5 / SHA-256 signature.

    Args:
        public_key: RSA public key
        message: Original message (string or bytes)
        signature: Signature to verify

    Returns:
        bool: True if signature is valid, False otherwise
    """
    try:
        public_key.verify(signature, _to_bytes(message), padding.PKCS1v15(), hashes.SHA256())
        return True
    except InvalidSignature:
        return False

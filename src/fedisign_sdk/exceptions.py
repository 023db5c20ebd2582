"""
Exception classes for fedisign Python SDK
"""

from typing import Optional, Dict, Any


class FedisignSDKError(Exception):
    """Base exception for all fedisign SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(FedisignSDKError):
    """Exception raised for validation failures"""
    pass


class InvalidActorError(FedisignSDKError):
    """Exception raised when signing is requested for an actor we hold no key for"""
    
    def __init__(self, message: str, error_code: str = "INVALID_ACTOR",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class TransportError(FedisignSDKError):
    """Exception raised for network-layer failures (DNS, connect, TLS, timeout)"""
    
    def __init__(self, message: str, error_code: str = "TRANSPORT_ERROR",
                 details: Optional[Dict[str, Any]] = None,
                 original_error: Optional[BaseException] = None):
        super().__init__(message, error_code, details)
        self.original_error = original_error


class ResponseTooLargeError(FedisignSDKError):
    """Exception raised when a response body exceeds the configured byte limit"""
    
    def __init__(self, message: str, error_code: str = "RESPONSE_TOO_LARGE",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class RSAKeyError(FedisignSDKError):
    """Exception raised for RSA key loading or signing errors"""
    pass

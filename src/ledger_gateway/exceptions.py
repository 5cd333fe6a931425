# src/ledger_gateway/exceptions.py

class GatewayError(Exception):
    """Base exception class for gateway-related errors"""
    pass

class StorageError(GatewayError):
    """Raised when a storage query or connection fails"""
    pass

class StorageTimeoutError(StorageError):
    """Raised when no pooled storage connection is available"""
    pass

class InvalidIdentifier(GatewayError, ValueError):
    """Base exception class for malformed hex identifiers"""
    pass

class InvalidAddress(InvalidIdentifier):
    """Raised when a query does not decode to a 20-byte address"""
    pass

class InvalidHash(InvalidIdentifier):
    """Raised when a query does not decode to a 32-byte hash"""
    pass

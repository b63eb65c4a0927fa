from typing import Optional, Any, Dict

class ZcliError(Exception):
    """Base exception class for zcli errors"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class InvalidNetwork(ZcliError):
    """Network name outside of the supported set"""
    def __init__(self, network: Any = None):
        super().__init__("invalid network name", {"network": network} if network is not None else None)

class AddressNotFound(ZcliError):
    """Address is not among the locally known wallets"""
    def __init__(self, address: Optional[str] = None):
        super().__init__("address is not present", {"address": address} if address else None)

class TokenNotFound(ZcliError):
    """Token is missing from the network's token registry"""
    def __init__(self, token: Any = None):
        super().__init__("token not found", {"token": token} if token is not None else None)

class TransactionNotFound(ZcliError):
    """Account history holds no transaction"""
    pass

class InvalidAmount(ZcliError):
    """Amount cannot be expressed in the token's base units"""
    pass

class TransactionFailed(ZcliError):
    """Submitted transaction was rejected or reverted"""
    pass

class ConfigurationError(ZcliError):
    """Settings required for the requested network are missing"""
    pass

def format_error_response(error: ZcliError) -> Dict[str, Any]:
    """Format error for JSON output"""
    return {
        "error": error.__class__.__name__,
        "message": error.message,
        "details": error.details
    }

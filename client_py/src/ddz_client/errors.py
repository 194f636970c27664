# client_py/src/ddz_client/errors.py

class ClientError(Exception):
    """Base exception for client-side errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
INVALID_CARD = "INVALID_CARD"
MALFORMED_MESSAGE = "MALFORMED_MESSAGE"
UNKNOWN_MESSAGE = "UNKNOWN_MESSAGE"
NOT_CONNECTED = "NOT_CONNECTED"
INVALID_SELECTION = "INVALID_SELECTION"
INVALID_CONFIG = "INVALID_CONFIG"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise ClientError(code, message)

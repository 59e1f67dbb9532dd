"""
Custom exceptions for the application.
"""


class ValidationError(Exception):
    """Exception raised when request input validation fails."""
    pass


class ChatNotFoundError(Exception):
    """
    Exception raised when a knowledge-base operation targets a chat id
    that does not exist.
    """
    def __init__(self, chat_id: str, message: str = "Chat not found"):
        self.chat_id = chat_id
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return self.message


class ModelConfigurationError(ValueError):
    """Exception raised when the configured endpoint or model is unknown."""
    pass

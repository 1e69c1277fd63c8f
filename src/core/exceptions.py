"""Custom exceptions. Every error raised on purpose by this project derives from GameError."""


class GameError(Exception):
    """Top-level exception for the Street Dice core."""


class InvalidRequestError(GameError):
    """A request model could not be validated."""


class InvalidRollError(GameError):
    """Dice handed to the evaluator are not three faces in [1, 6]."""


class RepositoryError(GameError):
    """Something went wrong talking to the message store."""


class StoreWriteError(RepositoryError):
    """Replacing a message's text failed. Never retried."""


class ConfigError(GameError):
    """Invalid runtime configuration."""

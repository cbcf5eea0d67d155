from console_remover.dialect import Dialect
from console_remover.exceptions import (
    ConfigError,
    ConsoleRemoverError,
    ParseError,
    SerializationError,
)
from console_remover.transform import TransformResult, transform, transform_source

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConsoleRemoverError",
    "Dialect",
    "ParseError",
    "SerializationError",
    "TransformResult",
    "transform",
    "transform_source",
]

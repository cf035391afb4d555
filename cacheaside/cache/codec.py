"""
Value codecs
Turn cached values into store text and back

Any object exposing encode(value) -> str and decode(text) -> value can be
handed to Cache; IValueCodec is provided for implementations that want the
contract spelled out.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class IValueCodec(ABC):
    """Value codec interface."""
    
    @abstractmethod
    def encode(self, value: Any) -> str:
        """Serialize a value to store text."""
    
    @abstractmethod
    def decode(self, text: str) -> Any:
        """Deserialize store text. Malformed text must raise."""


class JsonCodec(IValueCodec):
    """
    Default codec.
    
    Round-trips dicts, lists, strings, numbers, booleans and None. Tuples come
    back as lists and non-string dict keys come back as strings, as with any
    JSON encoder.
    
    Args:
        default: Fallback for objects json cannot serialize (e.g. str for datetimes)
    """
    
    def __init__(self, default: Optional[Callable[[Any], Any]] = None):
        self.default = default
    
    def encode(self, value: Any) -> str:
        return json.dumps(value, ensure_ascii=False, default=self.default)
    
    def decode(self, text: str) -> Any:
        return json.loads(text)
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

"""
Response decoders.
"""
from .response_decoder import ResponseDecoder, JSONDecoder, TextDecoder

__all__ = ["ResponseDecoder", "JSONDecoder", "TextDecoder"]

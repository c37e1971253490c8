"""
Structured-to-JSON codec for logical row types
"""

from cdc_json.codec.json_codec import MAX_NESTING_DEPTH, JsonRowCodec

__all__ = ["JsonRowCodec", "MAX_NESTING_DEPTH"]

"""Parse shell curl command lines into structured HTTP requests."""

from .config import ParserConfig, load_config
from .curl import DEFAULT_MAX_COMMAND_LENGTH, parse_curl_command
from .escapes import decode_ansi_c
from .request import ParsedRequest

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_MAX_COMMAND_LENGTH",
    "ParsedRequest",
    "ParserConfig",
    "decode_ansi_c",
    "load_config",
    "parse_curl_command",
]

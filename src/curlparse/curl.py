"""Parse a shell curl command line into a ParsedRequest.

The command is treated as loose text, not tokenized: each field is pulled
out by its own pattern, so flags may appear in any order and anything we
don't recognize is simply left alone.
"""

import re
from typing import Callable, Optional
from urllib.parse import urlsplit

from .escapes import decode_ansi_c
from .request import ParsedRequest

LogSink = Callable[[str], None]

# Longest command we run the patterns over
DEFAULT_MAX_COMMAND_LENGTH = 1024 * 1024

# Body of a $'...' string; a backslash may escape the closing quote
_DOLLAR_QUOTED = r"\$'((?:[^'\\]|\\[\s\S])*)'"

# A flag only counts at the start of a word
_FLAG_START = r"(?<!\S)"

COOKIE_DOLLAR_PATTERN = re.compile(_FLAG_START + r"(?:--cookie|-b)\s+" + _DOLLAR_QUOTED)
COOKIE_QUOTED_PATTERN = re.compile(_FLAG_START + r"(?:--cookie|-b)\s+(['\"])(.*?)\1", re.DOTALL)

METHOD_PATTERN = re.compile(
    _FLAG_START + r"(?:--request|-X)\s+(?:" + _DOLLAR_QUOTED + r"|['\"]?([A-Z]+)['\"]?)"
)

# Tried in order, first hit wins; the flag says whether to decode escapes
URL_PATTERNS: list[tuple[re.Pattern, bool]] = [
    (re.compile(r"\$'(https?://(?:[^'\\]|\\[\s\S])*)'"), True),
    (re.compile(r"['\"](https?://[^'\"]+)['\"]"), False),
    (re.compile(r"(https?://[^\s'\"]+)"), False),
]

# $'...' | quoted (ends at the next quote of either kind) | bare word
HEADER_PATTERN = re.compile(
    _FLAG_START + r"(?:--header|-H)\s+(?:" + _DOLLAR_QUOTED + r"|['\"]([^'\"]+)['\"]?|([^\s'\"]+))"
)

_BODY_FLAGS = _FLAG_START + r"(?:--data-binary|--data-raw|--data|-d)\s+"
BODY_DOLLAR_PATTERN = re.compile(_BODY_FLAGS + _DOLLAR_QUOTED)
BODY_QUOTED_PATTERN = re.compile(_BODY_FLAGS + r"(['\"])(.*?)\1", re.DOTALL)


def _emit(log: Optional[LogSink], message: str) -> None:
    if log is None:
        return
    try:
        log(message)
    except Exception:
        # Diagnostics must never break a parse
        pass


def dollar_quote(text: str) -> str:
    """Quote text as $'...' so decode_ansi_c gives it back unchanged."""
    return "$'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def normalize_cookie_flags(command: str) -> str:
    """Rewrite every -b/--cookie flag into an equivalent -H 'Cookie: ...' flag."""

    def from_dollar(match: re.Match) -> str:
        value = decode_ansi_c(match.group(1))
        return "-H " + dollar_quote(f"Cookie: {value}")

    def from_quoted(match: re.Match) -> str:
        quote = match.group(1)
        return f"-H {quote}Cookie: {match.group(2)}{quote}"

    command = COOKIE_DOLLAR_PATTERN.sub(from_dollar, command)
    return COOKIE_QUOTED_PATTERN.sub(from_quoted, command)


def extract_method(command: str) -> Optional[str]:
    """Return the -X/--request token, or None when there isn't one."""
    match = METHOD_PATTERN.search(command)
    if not match:
        return None
    if match.group(1) is not None:
        return decode_ansi_c(match.group(1)) or None
    return match.group(2)


def extract_url(command: str) -> Optional[str]:
    """Find the first http(s) URL, preferring $'...' then quoted then bare forms."""
    for pattern, dollar_quoted in URL_PATTERNS:
        match = pattern.search(command)
        if match:
            url = match.group(1)
            return decode_ansi_c(url) if dollar_quoted else url
    return None


def split_url(url: str) -> tuple[str, str, str, Optional[str], Optional[int]]:
    """Split a URL into (scheme, host, path, query, port).

    path is "" when the URL has none. query is None when there is no "?",
    port is None when there is no explicit port.

    Raises:
        ValueError: If the URL is malformed or has no host.
    """
    parts = urlsplit(url)
    port = parts.port

    host = parts.netloc.rpartition("@")[2]
    if ":" in host and not host.endswith("]"):
        host = host.rpartition(":")[0]
    if not host:
        raise ValueError(f"no host in {url!r}")

    query: Optional[str] = parts.query
    if not query and "?" not in url.split("#", 1)[0]:
        query = None

    return parts.scheme, host, parts.path, query, port


def extract_headers(command: str) -> list[tuple[str, str]]:
    """Collect (name, value) pairs from -H/--header flags.

    The first header seen for a name wins; names compare case-insensitively.
    """
    headers: list[tuple[str, str]] = []
    seen: set[str] = set()

    for match in HEADER_PATTERN.finditer(command):
        if match.group(1) is not None:
            header = decode_ansi_c(match.group(1))
        else:
            header = match.group(2) or match.group(3)

        if ":" not in header:
            continue
        name, value = header.split(":", 1)
        name = name.strip()
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        headers.append((name, value.strip()))

    return headers


def extract_body(command: str) -> Optional[str]:
    """Return the --data-binary/--data-raw/--data/-d payload, or None."""
    match = BODY_DOLLAR_PATTERN.search(command)
    if match:
        return decode_ansi_c(match.group(1))

    match = BODY_QUOTED_PATTERN.search(command)
    if match:
        return match.group(2)

    return None


def parse_curl_command(
    command: str,
    log: Optional[LogSink] = None,
    max_length: Optional[int] = DEFAULT_MAX_COMMAND_LENGTH,
) -> Optional[ParsedRequest]:
    """Parse a curl command string into a ParsedRequest.

    Args:
        command: The full curl command, e.g. from a browser's "Copy as cURL".
        log: Optional sink for diagnostic messages.
        max_length: Commands longer than this are rejected. None disables the check.

    Returns:
        The parsed request, or None if no usable URL was found.
    """
    _emit(log, f"parse_curl_command(): {command}")

    if max_length is not None and len(command) > max_length:
        _emit(log, f"Curl command exceeds {max_length} characters")
        return None

    command = normalize_cookie_flags(command)

    url = extract_url(command)
    if url is None:
        _emit(log, "No valid URL found in curl command")
        return None
    _emit(log, f"url: {url}")

    try:
        scheme, host, path, query, port = split_url(url)
    except ValueError as e:
        _emit(log, f"Failed to parse URL: {url} ({e})")
        return None

    method = extract_method(command)
    headers = extract_headers(command)
    body = extract_body(command)

    # A payload without an explicit method means POST, like curl itself.
    # An explicit method is never replaced, not even -X GET with a body.
    if method is None:
        method = "GET" if body is None else "POST"

    _emit(log, f"parse_curl_command() complete: host: {host} path: {path}")
    _emit(log, f"Body: {body or ''}")

    return ParsedRequest(
        method=method,
        scheme=scheme,
        host=host,
        raw_path=path,
        query=query,
        port=port,
        headers=tuple(headers),
        body=body or "",
    )

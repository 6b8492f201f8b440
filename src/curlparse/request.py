"""Request descriptor produced by the curl command parser."""

import json
from dataclasses import dataclass
from typing import Optional

# Ports left out of a rebuilt URL for their scheme
DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}


@dataclass(frozen=True)
class ParsedRequest:
    """An HTTP request recovered from a curl command line.

    ``raw_path`` is the path exactly as it appeared in the URL and may be
    empty; read ``path`` to get the "/"-normalized form. ``port`` is None
    when the URL carried no explicit port.
    """
    method: str = "GET"
    scheme: Optional[str] = None
    host: str = ""
    raw_path: str = ""
    query: Optional[str] = None
    port: Optional[int] = None
    headers: tuple[tuple[str, str], ...] = ()
    body: str = ""

    @property
    def path(self) -> str:
        return self.raw_path or "/"

    @property
    def request_target(self) -> str:
        """Path plus "?query" when there is a query."""
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    @property
    def netloc(self) -> str:
        """Host, plus ":port" unless the port is absent or the scheme default."""
        if self.port is None or DEFAULT_PORTS.get(self.scheme) == self.port:
            return self.host
        return f"{self.host}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.netloc}{self.request_target}"

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for header_name, value in self.headers:
            if header_name.lower() == wanted:
                return value
        return default

    def to_http(self) -> str:
        """Render as an HTTP/1.1 request message."""
        lines = [f"{self.method} {self.request_target} HTTP/1.1"]
        if self.get_header("Host") is None:
            lines.append(f"Host: {self.netloc}")
        lines.extend(f"{name}: {value}" for name, value in self.headers)
        return "\r\n".join(lines) + "\r\n\r\n" + self.body

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "method": self.method,
            "scheme": self.scheme,
            "host": self.host,
            "port": self.port,
            "path": self.path,
            "query": self.query,
            "url": self.base_url,
            "headers": [[name, value] for name, value in self.headers],
            "body": self.body,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string"""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

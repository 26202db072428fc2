"""Request and response entities stored in cache partitions."""

import hashlib
from dataclasses import dataclass, field, replace
from urllib.parse import urlsplit


def _normalize_headers(headers: dict[str, str] | None) -> dict[str, str]:
    return {k.lower(): v for k, v in (headers or {}).items()}


@dataclass(frozen=True)
class CachedRequest:
    """An intercepted request.

    Attributes:
        method: Upper-cased HTTP method
        url: Absolute request URL
        headers: Request headers with lower-cased names
        body: Raw request body (empty for GET)
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", _normalize_headers(self.headers))

    @classmethod
    def get(cls, url: str, headers: dict[str, str] | None = None) -> "CachedRequest":
        """Build a GET request, the only kind the fetch policy intercepts."""
        return cls(method="GET", url=url, headers=headers or {})

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme.lower()

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def is_http(self) -> bool:
        return self.scheme in ("http", "https")

    @property
    def accepts_html(self) -> bool:
        """True when the Accept header asks for an HTML document."""
        return "text/html" in self.headers.get("accept", "")

    @property
    def cache_key(self) -> str:
        """Key under which the request is stored in a partition.

        Bodiless requests are keyed by method and URL. Requests carrying a
        body also get a digest of it, so two queued submissions to the same
        endpoint are stored side by side.
        """
        if not self.body:
            return f"{self.method} {self.url}"
        digest = hashlib.sha256(self.body).hexdigest()[:16]
        return f"{self.method} {self.url} #{digest}"


@dataclass(frozen=True)
class CachedResponse:
    """A response as returned by the network or read from a partition.

    Attributes:
        status: HTTP status code
        headers: Response headers with lower-cased names; repeated fields are
            joined with ", "
        body: Raw response body
        url: URL the response was produced for (empty for synthetic responses)
        cookies: Set-Cookie values, one per cookie (never joined)
    """

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""
    cookies: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _normalize_headers(self.headers))
        object.__setattr__(self, "cookies", tuple(self.cookies))

    @classmethod
    def text_response(
        cls,
        text: str,
        status: int = 200,
        content_type: str = "text/plain; charset=utf-8",
    ) -> "CachedResponse":
        """Build a synthetic UTF-8 text response."""
        return cls(status=status, headers={"content-type": content_type}, body=text.encode("utf-8"))

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status <= 299

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def clone(self) -> "CachedResponse":
        """Return an independent copy suitable for storing in a partition."""
        return replace(self, headers=dict(self.headers))

"""Per-call transport configuration: credentials, proxy, timeouts and locale."""

from __future__ import annotations

import base64
import re
from fnmatch import fnmatchcase
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """User/secret pair used for HTTP Basic authentication."""
    model_config = ConfigDict(frozen=True)

    user: Optional[str] = None
    password: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.user and self.user.strip() and self.password and self.password.strip())

    def basic_auth_header(self) -> str:
        raw = f"{self.user}:{self.password}".encode("utf-8")
        b64 = base64.b64encode(raw).decode("ascii")
        return f"Basic {b64}"


class ProxySettings(BaseModel):
    """HTTP proxy and the hosts that bypass it."""
    model_config = ConfigDict(frozen=True)

    host: str
    port: int = 8080
    user: Optional[str] = None
    password: Optional[str] = None
    non_proxy_hosts: Optional[str] = Field(default=None, description="'|' or ',' separated host patterns")

    def non_proxy_patterns(self) -> List[str]:
        if not self.non_proxy_hosts:
            return []
        return [p.strip().lower() for p in re.split(r"[|,]", self.non_proxy_hosts) if p.strip()]

    def applies_to(self, url: str) -> bool:
        """False when the host of ``url`` matches one of the non-proxy patterns."""
        host = (httpx.URL(url).host or "").lower()
        return not any(fnmatchcase(host, pattern) for pattern in self.non_proxy_patterns())

    def to_httpx(self) -> httpx.Proxy:
        auth = (self.user, self.password or "") if self.user else None
        return httpx.Proxy(f"http://{self.host}:{self.port}", auth=auth)


class TransportConfig(BaseModel):
    """Timeouts, locale and proxy applied to the HTTP client of one fetch."""
    model_config = ConfigDict(frozen=True)

    connection_timeout: float = Field(default=36.0, description="Connect timeout in seconds")
    response_timeout: float = Field(default=32.0, description="Read timeout in seconds")
    locale: str = Field(default="en", description="Locale tag, e.g. en_US")
    proxy: Optional[ProxySettings] = None

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connection_timeout,
            read=self.response_timeout,
            write=self.response_timeout,
            pool=self.connection_timeout,
        )

    def accept_language(self) -> str:
        """Language subtag of the locale: ``en_US`` and ``en-US`` both give ``en``."""
        return re.split(r"[-_]", self.locale.strip(), maxsplit=1)[0].lower() or "en"


# PUBLIC_INTERFACE
def resolve_proxy(config: TransportConfig, url: str) -> Optional[httpx.Proxy]:
    """Return the proxy to use for requests to ``url`` during this call, if any."""
    proxy = config.proxy
    if proxy is None or not proxy.host:
        return None
    if not proxy.applies_to(url):
        return None
    return proxy.to_httpx()

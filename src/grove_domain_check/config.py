"""
grove-domain-check configuration

Endpoints, timeouts, cache lifetimes and concurrency limits live here.
Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "")
    return int(value) if value else None


@dataclass
class EndpointConfig:
    """Where we send lookups"""
    doh_url: str = os.getenv("DOH_URL", "https://cloudflare-dns.com/dns-query")
    rdap_url: str = os.getenv("RDAP_URL", "https://rdap.org")
    user_agent: str = os.getenv("USER_AGENT", "grove-domain-check/0.1.0")


@dataclass
class TimeoutConfig:
    """Per-request timeouts in seconds"""
    dns_seconds: float = float(os.getenv("DNS_TIMEOUT", "2.0"))
    rdap_seconds: float = float(os.getenv("RDAP_TIMEOUT", "8.0"))


@dataclass
class CacheConfig:
    """How long verification results stay fresh"""
    result_ttl_seconds: float = float(os.getenv("RESULT_TTL", "300"))  # 5 min
    dns_reject_ttl_seconds: float = float(os.getenv("DNS_REJECT_TTL", "120"))  # 2 min
    max_entries: Optional[int] = field(default_factory=lambda: _optional_int("CACHE_MAX_ENTRIES"))


@dataclass
class RateLimitConfig:
    """How hard we lean on DoH and RDAP"""
    max_concurrent_checks: int = int(os.getenv("MAX_CONCURRENT_CHECKS", "4"))
    max_concurrency: int = int(os.getenv("MAX_CONCURRENCY", "10"))
    max_domains_per_call: int = int(os.getenv("MAX_DOMAINS_PER_CALL", "15"))


@dataclass
class Config:
    """Master config, import this"""
    endpoints: EndpointConfig = field(default_factory=EndpointConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)

    @classmethod
    def fast_mode(cls) -> "Config":
        """For development/testing: short timeouts and cache lifetimes"""
        cfg = cls()
        cfg.timeouts.dns_seconds = 0.5
        cfg.timeouts.rdap_seconds = 1.0
        cfg.cache.result_ttl_seconds = 5
        cfg.cache.dns_reject_ttl_seconds = 1
        return cfg


# Singleton
config = Config()

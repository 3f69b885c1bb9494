"""
Domain availability verification

Combines the two lookups for each domain:
1. DoH pre-filter - if the domain resolves, it's taken (fast reject)
2. RDAP check - 404 = available, 200 = taken, anything else = not available

Results are cached per normalized domain so repeated and bulk queries
don't hit the upstreams again until the entry expires.

Known false negative: a domain whose registration lapsed while stale DNS
records still resolve is fast-rejected and reported as taken. We accept
that for the speed of skipping RDAP.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Literal, Optional

import httpx

from .cache import TTLCache
from .config import Config, config as default_config
from .doh import check_dns, describe_error
from .rdap import check_rdap

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://")


def normalize_domain(domain: str) -> str:
    """
    Reduce user input to a bare, lower-cased domain name.

    "HTTPS://Example.com/path?q=1" -> "example.com"
    """
    domain = domain.strip().lower()
    domain = _SCHEME.sub("", domain)
    domain = re.split(r"[/?#]", domain, maxsplit=1)[0]
    return domain.rstrip(".")


@dataclass(frozen=True)
class AvailabilityResult:
    """Final verdict for one domain."""
    domain: str
    can_buy: bool
    fast_reject: Optional[Literal["dns"]] = None
    timeout: bool = False
    error: Optional[str] = None

    @property
    def has_problem(self) -> bool:
        """Did a timeout or error force the verdict?"""
        return self.timeout or self.error is not None

    def to_dict(self) -> dict:
        result = {"domain": self.domain, "canBuy": self.can_buy}
        if self.fast_reject:
            result["fastReject"] = self.fast_reject
        if self.timeout:
            result["timeout"] = True
        if self.error is not None:
            result["error"] = self.error
        return result


class DomainVerifier:
    """
    Runs the DoH -> RDAP sequence for one domain or many.

    Bulk checks run concurrently behind a semaphore; one domain failing
    never affects the others.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[TTLCache["AvailabilityResult"]] = None,
        config: Optional[Config] = None,
    ):
        """
        Initialize verifier.

        Args:
            client: Shared HTTP client (short-lived clients are used if None)
            cache: Result cache (a fresh one is created if None)
            config: Configuration (defaults to the module singleton)
        """
        self.client = client
        self.config = config or default_config
        self.cache = cache if cache is not None else TTLCache(
            max_entries=self.config.cache.max_entries
        )

    async def verify_domain(self, domain: str) -> AvailabilityResult:
        """
        Verify a single domain.

        Never raises for lookup failures; they end up in the result's
        error/timeout fields with can_buy=False.
        """
        domain = normalize_domain(domain)

        cached = self.cache.get(domain)
        if cached is not None:
            logger.debug(f"Cache hit for {domain}")
            return cached

        try:
            result, ttl = await self._lookup(domain)
        except Exception as e:
            logger.exception(f"Verification of {domain} failed unexpectedly")
            result = AvailabilityResult(domain=domain, can_buy=False, error=describe_error(e))
            ttl = self.config.cache.result_ttl_seconds

        self.cache.set(domain, result, ttl)
        return result

    async def _lookup(self, domain: str) -> tuple[AvailabilityResult, float]:
        cache_cfg = self.config.cache

        dns = await check_dns(
            domain,
            self.client,
            url=self.config.endpoints.doh_url,
            timeout=self.config.timeouts.dns_seconds,
        )
        if dns.has_records:
            logger.debug(f"{domain} has DNS records, skipping RDAP")
            return (
                AvailabilityResult(domain=domain, can_buy=False, fast_reject="dns"),
                cache_cfg.dns_reject_ttl_seconds,
            )

        rdap = await check_rdap(
            domain,
            self.client,
            base_url=self.config.endpoints.rdap_url,
            timeout=self.config.timeouts.rdap_seconds,
        )
        if rdap.timed_out:
            result = AvailabilityResult(domain=domain, can_buy=False, timeout=True)
        else:
            result = AvailabilityResult(domain=domain, can_buy=rdap.available, error=rdap.error)

        return result, cache_cfg.result_ttl_seconds

    async def verify_domains(
        self,
        domains: list[str],
        concurrency: Optional[int] = None,
    ) -> list[AvailabilityResult]:
        """
        Verify many domains concurrently.

        Args:
            domains: Domains to check
            concurrency: Max checks in flight (defaults to config)

        Returns:
            One AvailabilityResult per input, in input order
        """
        concurrency = concurrency or self.config.rate_limit.max_concurrent_checks
        semaphore = asyncio.Semaphore(max(1, concurrency))

        async def limited_verify(domain: str) -> AvailabilityResult:
            async with semaphore:
                return await self.verify_domain(domain)

        return list(await asyncio.gather(*[limited_verify(d) for d in domains]))


_default_verifier: Optional[DomainVerifier] = None


def get_default_verifier() -> DomainVerifier:
    """Process-wide verifier backing the module-level helpers."""
    global _default_verifier
    if _default_verifier is None:
        _default_verifier = DomainVerifier()
    return _default_verifier


async def verify_domain(domain: str) -> AvailabilityResult:
    """Verify one domain with the shared verifier and cache."""
    return await get_default_verifier().verify_domain(domain)


async def verify_domains(
    domains: list[str],
    concurrency: Optional[int] = None,
) -> list[AvailabilityResult]:
    """Verify many domains with the shared verifier and cache."""
    return await get_default_verifier().verify_domains(domains, concurrency=concurrency)

"""
DNS-over-HTTPS pre-filter

Asks a DoH resolver (Cloudflare 1.1.1.1 by default) for the domain's A
record. An answer means the domain is almost certainly registered, so the
expensive RDAP lookup can be skipped.

Failures here never block anything: a timeout or network error is reported
as "no records" and the caller moves on to the authoritative check.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .config import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DNSSignal:
    """Outcome of a DoH lookup."""
    has_records: bool
    error: Optional[str] = None


def describe_error(exc: Exception) -> str:
    """Readable message for an exception, even when str(exc) is empty."""
    return str(exc) or exc.__class__.__name__


async def check_dns(
    domain: str,
    client: Optional[httpx.AsyncClient] = None,
    *,
    url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> DNSSignal:
    """
    Check whether a domain resolves to any A records.

    Args:
        domain: Normalized domain name
        client: Shared HTTP client (a short-lived one is created if omitted)
        url: DoH endpoint override
        timeout: Timeout override in seconds

    Returns:
        DNSSignal; has_records is True only on HTTP 200 with a non-empty Answer
    """
    if client is None:
        async with httpx.AsyncClient(
            headers={"User-Agent": config.endpoints.user_agent}
        ) as owned_client:
            return await check_dns(domain, owned_client, url=url, timeout=timeout)

    url = url or config.endpoints.doh_url
    timeout = timeout if timeout is not None else config.timeouts.dns_seconds

    try:
        # httpx timeouts apply per read; wait_for bounds the whole call
        response = await asyncio.wait_for(
            client.get(
                url,
                params={"name": domain, "type": "A"},
                headers={"Accept": "application/dns-json"},
                timeout=timeout,
            ),
            timeout,
        )

        if response.status_code != 200:
            return DNSSignal(has_records=False, error=f"DoH request failed: {response.status_code}")

        data = response.json()
        answer = data.get("Answer") if isinstance(data, dict) else None
        return DNSSignal(has_records=isinstance(answer, list) and len(answer) > 0)

    except asyncio.TimeoutError:
        logger.warning(f"DoH lookup timed out for {domain} after {timeout}s")
        return DNSSignal(has_records=False, error=f"DoH request timed out after {timeout}s")
    except (httpx.HTTPError, ValueError) as e:
        # Timeout, network error or garbage body: assume no records
        logger.warning(f"DoH lookup failed for {domain}: {describe_error(e)}")
        return DNSSignal(has_records=False, error=describe_error(e))

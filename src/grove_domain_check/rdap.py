"""
RDAP registry lookup

The authoritative availability signal. Queries an RDAP bootstrap proxy
(rdap.org by default), which redirects to the registry's own RDAP server
for the TLD.

    404 = not found = available
    200 = found = registered

Anything else, including timeouts and network errors, is reported as
"not available". Showing a taken domain as available is the worse mistake.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import httpx

from .config import config
from .doh import describe_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RDAPSignal:
    """Outcome of an RDAP lookup."""
    available: bool
    error: Optional[str] = None
    timed_out: bool = False


async def check_rdap(
    domain: str,
    client: Optional[httpx.AsyncClient] = None,
    *,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> RDAPSignal:
    """
    Check domain availability via RDAP.

    Args:
        domain: Normalized domain name
        client: Shared HTTP client (a short-lived one is created if omitted)
        base_url: RDAP bootstrap base URL override
        timeout: Timeout override in seconds

    Returns:
        RDAPSignal; available is True only on HTTP 404
    """
    if client is None:
        async with httpx.AsyncClient(
            headers={"User-Agent": config.endpoints.user_agent}
        ) as owned_client:
            return await check_rdap(domain, owned_client, base_url=base_url, timeout=timeout)

    base_url = (base_url or config.endpoints.rdap_url).rstrip("/")
    timeout = timeout if timeout is not None else config.timeouts.rdap_seconds
    url = f"{base_url}/domain/{quote(domain, safe='')}"

    try:
        # Covers every redirect hop and the body, not just each socket read
        response = await asyncio.wait_for(
            client.get(
                url,
                headers={"Accept": "application/rdap+json, application/json"},
                follow_redirects=True,
                timeout=timeout,
            ),
            timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(f"RDAP lookup timed out for {domain} after {timeout}s")
        return RDAPSignal(
            available=False, error=f"RDAP request timed out after {timeout}s", timed_out=True
        )
    except httpx.TimeoutException as e:
        logger.warning(f"RDAP lookup timed out for {domain} after {timeout}s")
        return RDAPSignal(available=False, error=describe_error(e), timed_out=True)
    except httpx.HTTPError as e:
        logger.warning(f"RDAP lookup failed for {domain}: {describe_error(e)}")
        return RDAPSignal(available=False, error=describe_error(e))

    if response.status_code == 404:
        return RDAPSignal(available=True)

    if response.status_code == 200:
        return RDAPSignal(available=False)

    logger.warning(f"Unexpected RDAP status for {domain}: {response.status_code}")
    return RDAPSignal(available=False, error=f"Unexpected RDAP status: {response.status_code}")

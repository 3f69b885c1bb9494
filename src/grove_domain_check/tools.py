"""
Tool definitions for the domain-check server.

Defines the tools exposed over the tool-invocation channel, their argument
validation, and the handlers that turn verification results into the
text + structured payload callers receive.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .checker import AvailabilityResult, DomainVerifier, normalize_domain
from .config import config
from .errors import ToolArgumentError


@dataclass
class ToolDefinition:
    """Definition of a tool callers can invoke."""
    name: str
    description: str
    parameters: Dict[str, Any]  # JSON Schema

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }


# =============================================================================
# Tool Definitions
# =============================================================================

CHECK_DOMAINS_TOOL = ToolDefinition(
    name="check_domains_availability",
    description=(
        "Fast bulk domain availability check via RDAP. No API key. "
        f"1–{config.rate_limit.max_domains_per_call} domains, parallel. "
        "Use BEFORE looking up registrar pricing."
    ),
    parameters={
        "type": "object",
        "properties": {
            "domains": {
                "type": "string",
                "description": (
                    'Comma-separated domains (e.g. "example.com, test.io, myapp.net"). '
                    f"Max {config.rate_limit.max_domains_per_call}."
                ),
            },
            "concurrency": {
                "type": "number",
                "minimum": 1,
                "maximum": config.rate_limit.max_concurrency,
                "description": (
                    f"Number of parallel workers (1–{config.rate_limit.max_concurrency}, "
                    f"default {config.rate_limit.max_concurrent_checks})"
                ),
            },
        },
        "required": ["domains"],
    },
)

INVALID_INPUT_TEXT = (
    "Invalid input. Provide comma-separated domains (e.g. example.com, test.io). "
    f"Max {config.rate_limit.max_domains_per_call} domains."
)


# =============================================================================
# Argument Handling
# =============================================================================

@dataclass
class CheckDomainsArgs:
    """Validated arguments for check_domains_availability."""
    domains: str
    concurrency: int = config.rate_limit.max_concurrent_checks

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckDomainsArgs":
        domains = data.get("domains")
        if not isinstance(domains, str):
            raise ToolArgumentError("'domains' must be a comma-separated string")

        concurrency = data.get("concurrency")
        if concurrency is None:
            return cls(domains=domains)

        # bool is an int subclass; reject it explicitly
        if isinstance(concurrency, bool) or not isinstance(concurrency, (int, float)):
            raise ToolArgumentError("'concurrency' must be a number")
        if concurrency != int(concurrency):
            raise ToolArgumentError("'concurrency' must be a whole number")

        max_concurrency = config.rate_limit.max_concurrency
        if not 1 <= concurrency <= max_concurrency:
            raise ToolArgumentError(f"'concurrency' must be between 1 and {max_concurrency}")

        return cls(domains=domains, concurrency=int(concurrency))


def parse_domain_list(raw: str, limit: Optional[int] = None) -> List[str]:
    """
    Split a comma-separated domain string into unique normalized domains.

    Entries without a dot are dropped, order is preserved, and the list is
    capped at limit (defaults to config).
    """
    limit = limit if limit is not None else config.rate_limit.max_domains_per_call

    unique: List[str] = []
    seen = set()
    for item in raw.split(","):
        domain = normalize_domain(item)
        if "." not in domain or domain in seen:
            continue
        seen.add(domain)
        unique.append(domain)

    return unique[:limit]


def format_results_text(results: List[AvailabilityResult]) -> str:
    """Human-readable summary grouped by outcome."""
    available = [r for r in results if r.can_buy]
    unavailable = [r for r in results if not r.can_buy and not r.has_problem]
    with_errors = [r for r in results if r.has_problem]

    lines = [f"Bulk check ({len(results)} domains):", ""]

    if available:
        lines.append(f"Available ({len(available)}):")
        lines.extend(f"✅ {r.domain}" for r in available)
        lines.append("")

    if unavailable:
        lines.append(f"Not Available ({len(unavailable)}):")
        lines.extend(f"❌ {r.domain}" for r in unavailable)
        lines.append("")

    if with_errors:
        lines.append(f"Errors/Timeouts ({len(with_errors)}):")
        for r in with_errors:
            detail = f": {r.error}" if r.error else " (timeout)"
            lines.append(f"⚠️ {r.domain}{detail}")
        lines.append("")

    return "\n".join(lines).strip()


def text_content(text: str, **extra: Any) -> Dict[str, Any]:
    """Wrap text in the tool response envelope."""
    response = {"content": [{"type": "text", "text": text}], "isError": False}
    response.update(extra)
    return response


# =============================================================================
# Handlers
# =============================================================================

async def handle_check_domains_availability(
    args: Dict[str, Any],
    verifier: DomainVerifier,
) -> Dict[str, Any]:
    """
    Handle a check_domains_availability call.

    Args:
        args: Raw tool arguments
        verifier: Verifier to run the checks with

    Returns:
        Tool response with a text summary and one structured result per
        domain in input order

    Raises:
        ToolArgumentError: If arguments are malformed
    """
    parsed = CheckDomainsArgs.from_dict(args)
    domains = parse_domain_list(parsed.domains)

    if not domains:
        return text_content(INVALID_INPUT_TEXT)

    results = await verifier.verify_domains(domains, concurrency=parsed.concurrency)

    return text_content(
        format_results_text(results),
        structuredContent={"results": [r.to_dict() for r in results]},
    )


ToolHandler = Callable[[Dict[str, Any], DomainVerifier], Awaitable[Dict[str, Any]]]

TOOLS: List[tuple[ToolDefinition, ToolHandler]] = [
    (CHECK_DOMAINS_TOOL, handle_check_domains_availability),
]

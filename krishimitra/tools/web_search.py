"""Web search gate: decides when to search and queries Tavily.

Search only ever enriches an answer. Any failure degrades to an empty
outcome so the chat response is never blocked on it.
"""

import time

import httpx
import structlog
from pydantic import BaseModel

from krishimitra.logging import log_search

logger = structlog.get_logger()

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
MAX_RESULTS = 5
QUERY_QUALIFIER = "agriculture India Maharashtra crops farming"

AGRICULTURAL_SOURCES = (
    "cropsap.maharashtra.gov.in",
    "krishi.maharashtra.gov.in",
    "mahaagri.gov.in",
    "plantwiseplusknowledgebank.org",
    "plantix.net",
    "aps.org",
    "icar.org.in",
)

SEARCH_TRIGGERS = (
    "weather", "temperature", "rain", "forecast", "climate", "humidity", "monsoon",
    "price", "market", "mandi", "rate", "cost",
    "news", "latest", "current", "today",
    "scheme", "subsidy", "government", "pm kisan",
    "where", "when", "how much",
    # Hindi
    "मौसम", "बारिश", "तापमान", "कीमत", "बाजार",
    # Marathi
    "हवामान", "पाऊस", "भाव",
)


class SearchOutcome(BaseModel):
    """Snippets and source URLs from a web search, in provider order."""

    snippets: list[str] = []
    source_urls: list[str] = []

    model_config = {"frozen": True}

    @classmethod
    def empty(cls) -> "SearchOutcome":
        return cls()


def needs_web_search(message: str) -> bool:
    """Check whether the message asks about something that changes over time."""
    lower_message = message.lower()
    return any(trigger in lower_message for trigger in SEARCH_TRIGGERS)


def _parse_results(data: dict) -> SearchOutcome:
    results = (data.get("results") or [])[:MAX_RESULTS]
    return SearchOutcome(
        snippets=[r["content"] for r in results if r.get("content")],
        source_urls=[r["url"] for r in results if r.get("url")],
    )


async def search_with_tavily(
    query: str,
    api_key: str,
    timeout: float = 20.0,
) -> SearchOutcome:
    """Search the allow-listed agricultural portals for the query.

    Never raises: transport errors, non-2xx responses and malformed payloads
    are logged and turned into an empty outcome.

    Args:
        query: Raw farmer query
        api_key: Tavily API key
        timeout: Request timeout in seconds

    Returns:
        SearchOutcome with at most five snippets and URLs
    """
    payload = {
        "api_key": api_key,
        "query": f"{query} {QUERY_QUALIFIER}",
        "search_depth": "advanced",
        "include_domains": list(AGRICULTURAL_SOURCES),
        "max_results": MAX_RESULTS,
    }

    start_time = time.perf_counter()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(TAVILY_SEARCH_URL, json=payload)

        if not 200 <= response.status_code < 300:
            log_search(
                query=query,
                results_count=0,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                error=f"HTTP {response.status_code}",
            )
            return SearchOutcome.empty()

        outcome = _parse_results(response.json())

    except httpx.HTTPError as e:
        logger.warning("Tavily request failed", error=str(e))
        log_search(
            query=query,
            results_count=0,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            error=str(e) or type(e).__name__,
        )
        return SearchOutcome.empty()
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Malformed Tavily response", error=str(e))
        log_search(
            query=query,
            results_count=0,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            error=f"malformed response: {e}",
        )
        return SearchOutcome.empty()

    log_search(
        query=query,
        results_count=len(outcome.snippets),
        duration_ms=(time.perf_counter() - start_time) * 1000,
    )
    return outcome

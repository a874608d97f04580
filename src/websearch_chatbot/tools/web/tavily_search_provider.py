import httpx

from websearch_chatbot.tools.web.search_provider import SearchResult

_TAVILY_SEARCH_URL = "https://api.tavily.com/search"
_TIMEOUT_SECONDS = 30
_DEFAULT_MAX_RESULTS = 5


class TavilySearchProvider:
    def __init__(
        self,
        api_key: str,
        *,
        max_results: int = _DEFAULT_MAX_RESULTS,
        timeout: float = _TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key
        self._max_results = max_results
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return "Tavily"

    async def search(self, query: str) -> list[SearchResult]:
        payload = {
            "api_key": self._api_key,
            "query": query,
            "max_results": self._max_results,
        }

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(_TAVILY_SEARCH_URL, json=payload)

        if response.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {response.status_code} from Tavily Search API",
                request=response.request,
                response=response,
            )

        try:
            data = response.json()
        except ValueError as ex:
            raise httpx.DecodingError(
                f"Tavily Search API returned a non-JSON body: {ex}", request=response.request
            ) from ex

        raw_results = (data.get("results") or []) if isinstance(data, dict) else None
        if not isinstance(raw_results, list) or not all(isinstance(r, dict) for r in raw_results):
            raise httpx.DecodingError(
                "Tavily Search API returned an unexpected response shape", request=response.request
            )

        return [
            SearchResult(
                content=str(r.get("content") or ""),
                title=str(r.get("title") or ""),
                url=str(r.get("url") or ""),
            )
            for r in raw_results
        ]

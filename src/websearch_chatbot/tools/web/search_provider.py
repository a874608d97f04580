from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SearchResult:
    content: str
    title: str = ""
    url: str = ""


@runtime_checkable
class SearchProvider(Protocol):
    @property
    def provider_name(self) -> str: ...

    async def search(self, query: str) -> list[SearchResult]:
        """Return search results in ranked order. Raises httpx errors on failure."""
        ...

"""
Larder Backend — Recipe Search
===============================

What:  Proxies recipe searches to Spoonacular's `complexSearch` endpoint.
How:   One shared httpx.AsyncClient, created with the app and closed on
       shutdown. The server-held API key is added to every call; the
       upstream `results` list is relayed without reshaping.
Who:   GET /recipes.

The API key travels in the query string, so neither request URLs nor
httpx exception text (which embeds the URL) are ever logged.
"""

import logging
from typing import Any, List, Optional

import httpx

from larder.exceptions import InternalError, ValidationError
from larder.schemas.recipe import RecipeSearchResponse

logger = logging.getLogger(__name__)

SEARCH_PATH = "/recipes/complexSearch"
SEARCH_FAILED = "Failed to fetch recipes"


class RecipeService:
    """Spoonacular client bound to one API key."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://api.spoonacular.com",
        page_size: int = 10,
    ):
        self.http_client = http_client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str = "https://api.spoonacular.com",
        page_size: int = 10,
    ) -> "RecipeService":
        """Create a service with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(),
            api_key=api_key,
            base_url=base_url,
            page_size=page_size,
        )

    async def search(self, query: Optional[str]) -> RecipeSearchResponse:
        """
        Search recipes by free-text query.

        Raises:
            ValidationError: `query` is missing or empty.
            InternalError: Transport failure, non-2xx status, or a body
                without a usable `results` list.
        """
        if not query:
            raise ValidationError(message="Missing query", field="query")

        try:
            response = await self.http_client.get(
                f"{self.base_url}{SEARCH_PATH}",
                params={
                    "query": query,
                    "number": self.page_size,
                    "apiKey": self.api_key,
                },
            )
            response.raise_for_status()
            results = self._results(response.json())
        except httpx.HTTPStatusError as e:
            logger.error("Recipe search upstream returned %d", e.response.status_code)
            raise InternalError(
                message=SEARCH_FAILED,
                context={"upstream_status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Recipe search transport error: %s", type(e).__name__)
            raise InternalError(
                message=SEARCH_FAILED,
                context={"cause": type(e).__name__},
            ) from e
        except ValueError as e:
            logger.error("Recipe search returned an unreadable body: %s", type(e).__name__)
            raise InternalError(message=SEARCH_FAILED, context={"cause": "bad_body"}) from e

        logger.info("Recipe search returned %d results", len(results))
        return RecipeSearchResponse(recipes=results)

    @staticmethod
    def _results(body: Any) -> List[Any]:
        """Pull `results` out of a complexSearch body; an absent key means none."""
        if not isinstance(body, dict):
            raise ValueError("response body is not an object")
        results = body.get("results", [])
        if not isinstance(results, list):
            raise ValueError("results is not a list")
        return results

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

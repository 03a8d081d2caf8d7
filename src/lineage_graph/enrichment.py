"""Image enrichment — portrait URLs for nodes that carry a ``wiki`` reference.

Lookups go to the MediaWiki ``pageimages`` API in batches of at most
``MAX_TITLES_PER_REQUEST`` titles. A failed lookup is logged and yields
no images; the node keeps its placeholder and the layout is untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol
from urllib.parse import unquote

import httpx

from lineage_graph.graph import NodeData

logger = logging.getLogger(__name__)

WIKIPEDIA_API = "https://en.wikipedia.org/w/api.php"
THUMBNAIL_SIZE = 100  # graph thumbnails
DETAIL_SIZE = 500  # detail view
MAX_TITLES_PER_REQUEST = 50


class ImageSource(Protocol):
    """Anything that can resolve node ids to image URLs."""

    async def thumbnails(self, nodes: Iterable[NodeData]) -> dict[str, str]:
        """Low-resolution image URL per node id; missing ids have no image."""
        ...

    async def detail_image(self, node: NodeData) -> str | None:
        """High-resolution image URL for one node, or None."""
        ...


# ─── Titles ───────────────────────────────────────────────────────────────────


def wiki_title(wiki: str) -> str:
    """Page title as it appears in a wiki URL (last path segment)."""
    return wiki.rstrip("/").rsplit("/", 1)[-1]


def display_title(url_title: str) -> str:
    """Page title as sent to the API: decoded, underscores as spaces."""
    return unquote(url_title).replace("_", " ")


def _chunks(items: list[str], size: int) -> Iterable[list[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


# ─── Wikipedia Source ─────────────────────────────────────────────────────────


class WikipediaImageSource:
    """Page images from the MediaWiki API, one request per batch of titles.

    HTTP errors, transport errors and malformed payloads are logged at
    WARNING and never raised to the caller.
    """

    def __init__(
        self,
        endpoint: str = WIKIPEDIA_API,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        user_agent: str = "lineage-graph/0.1",
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport
        self._user_agent = user_agent

    async def thumbnails(self, nodes: Iterable[NodeData]) -> dict[str, str]:
        with_wiki = [n for n in nodes if n.wiki]
        if not with_wiki:
            return {}

        titles = list(dict.fromkeys(display_title(wiki_title(n.wiki)) for n in with_wiki))
        by_title: dict[str, str] = {}
        for batch in _chunks(titles, MAX_TITLES_PER_REQUEST):
            by_title.update(await self._page_images(batch, THUMBNAIL_SIZE))

        result: dict[str, str] = {}
        for node in with_wiki:
            url = by_title.get(display_title(wiki_title(node.wiki)))
            if url:
                result[node.id] = url
        logger.info("resolved %d/%d thumbnails", len(result), len(with_wiki))
        return result

    async def detail_image(self, node: NodeData) -> str | None:
        if not node.wiki:
            return None
        title = display_title(wiki_title(node.wiki))
        images = await self._page_images([title], DETAIL_SIZE)
        if title in images:
            return images[title]
        # A single-title query answers with at most one page.
        return next(iter(images.values()), None)

    async def _page_images(self, titles: list[str], size: int) -> dict[str, str]:
        """Map requested title → thumbnail source for one batch."""
        params = {
            "action": "query",
            "titles": "|".join(titles),
            "prop": "pageimages",
            "format": "json",
            "pithumbsize": str(size),
            "redirects": "1",
            "origin": "*",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(
                    self._endpoint,
                    params=params,
                    headers={"User-Agent": self._user_agent},
                    follow_redirects=True,
                )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            logger.warning("image lookup failed for %d title(s): %s", len(titles), exc)
            return {}
        except ValueError as exc:
            logger.warning("image lookup returned malformed JSON: %s", exc)
            return {}
        return _parse_pages(payload)


def _title_aliases(query: dict[str, Any]) -> list[tuple[str, str]]:
    """``(from, to)`` pairs of the normalisation and redirect steps, in order."""
    pairs: list[tuple[str, str]] = []
    for key in ("normalized", "redirects"):
        steps = query.get(key)
        if not isinstance(steps, list):
            continue
        for step in steps:
            if isinstance(step, dict) and isinstance(step.get("from"), str) and isinstance(step.get("to"), str):
                pairs.append((step["from"], step["to"]))
    return pairs


def _parse_pages(payload: Any) -> dict[str, str]:
    """Thumbnail source per page title, also keyed by every requested alias."""
    if not isinstance(payload, dict):
        return {}
    query = payload.get("query")
    pages = query.get("pages") if isinstance(query, dict) else None
    if not isinstance(pages, dict):
        return {}
    images: dict[str, str] = {}
    for page in pages.values():
        thumb = page.get("thumbnail") if isinstance(page, dict) else None
        if isinstance(thumb, dict) and thumb.get("source") and page.get("title"):
            images[page["title"]] = thumb["source"]

    # Walk aliases backwards so a normalised title picks up its redirect target.
    for source, target in reversed(_title_aliases(query)):
        if target in images and source not in images:
            images[source] = images[target]
    return images

"""Command-line entry point: lay out a dataset and write SVG or positions."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from lineage_graph.enrichment import WikipediaImageSource
from lineage_graph.graph import DatasetError, load_dataset
from lineage_graph.layout.types import LayoutConfig
from lineage_graph.session import GraphSession

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lineage-graph",
        description="Lay out a generational lineage graph and render it",
    )
    parser.add_argument("path", help="Path to the JSON dataset ({nodes, edges})")
    parser.add_argument("--width", type=float, default=1200, help="Container width (default: 1200)")
    parser.add_argument("--height", type=float, default=800, help="Container height (default: 800)")
    parser.add_argument("--output", "-o", help="Write output here instead of stdout")
    parser.add_argument(
        "--format",
        choices=["svg", "json"],
        default="svg",
        help="Output format (default: svg)",
    )
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument("--select", help="Id of the node to select")
    selection.add_argument("--search", help="Select the first node whose label contains this text")
    parser.add_argument(
        "--no-enforce-gap",
        action="store_true",
        help="Skip the settle sweep after the fixed collision passes",
    )
    parser.add_argument(
        "--fetch-images",
        action="store_true",
        help="Fetch node thumbnails from Wikipedia before rendering",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def _positions(session: GraphSession) -> str:
    rows = [{"id": n.id, "generation": n.generation, "x": n.x, "y": n.y} for n in session.layout.nodes]
    return json.dumps(rows, indent=2)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        graph = load_dataset(args.path)
    except (DatasetError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    config = LayoutConfig(enforce_min_gap=not args.no_enforce_gap)
    source = WikipediaImageSource() if args.fetch_images else None
    session = GraphSession(graph, config=config, image_source=source)
    session.resize(args.width, args.height)
    logger.info("laid out %d nodes at width %s", len(session.layout.nodes), session.layout.width)

    if args.select:
        if not session.router.click_node(args.select):
            logger.warning("no node with id %r", args.select)
    elif args.search:
        if session.router.search(args.search) is None:
            logger.warning("no node matches %r", args.search)

    if args.fetch_images:
        asyncio.run(session.load_thumbnails())

    text = session.render_svg() if args.format == "svg" else _positions(session)
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8")
        logger.info("wrote %s", out)
    else:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Run the concept map pipeline on a file (or stdin) and print the JSON result."""

from __future__ import annotations

import argparse
import asyncio
import sys

from conceptmap.config import get_settings
from conceptmap.services.pipeline_service import build_default_pipeline
from conceptmap.utils.exceptions import ConceptMapError
from conceptmap.utils.logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Turn text into a concept map graph.")
    parser.add_argument("file", nargs="?", help="Text file to read (default: stdin)")
    parser.add_argument("--no-refine", action="store_true", help="Skip the refinement loop")
    parser.add_argument("--max-iterations", type=int, default=None, help="Refinement iterations")
    parser.add_argument("--diagram-type", default="mindmap", help="mindmap, flowchart, network, tree, orgchart or block")
    parser.add_argument("--no-simplify", action="store_true", help="Skip model-assisted label simplification")
    return parser.parse_args(argv)


def read_text(path: str | None) -> str:
    if path is None:
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    overrides = {"diagram_type": args.diagram_type, "simplify": not args.no_simplify}
    if args.no_refine:
        overrides["refine"] = False
    if args.max_iterations is not None:
        overrides["max_iterations"] = args.max_iterations

    pipeline = build_default_pipeline(settings)
    try:
        result = await pipeline.process(read_text(args.file), **overrides)
    except ConceptMapError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(result.model_dump_json(indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

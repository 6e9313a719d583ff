"""Dev CLI for model-search.

Usage:
    python -m model_search <query> [--sites a,b] [--limit N] [--page N]
    python -m model_search --popular [--sites a,b] [--limit N]
    python -m model_search --urls <query>

Results are printed as JSON on stdout.
"""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import dataclass, field

USAGE = (
    "Usage: python -m model_search <query> [--sites a,b] [--limit N] [--page N]\n"
    "       python -m model_search --popular [--sites a,b] [--limit N]\n"
    "       python -m model_search --urls <query>"
)

_VALUE_FLAGS = ("--sites", "--limit", "--page")


class UsageError(Exception):
    pass


@dataclass
class CliArgs:
    query: str = ""
    sites: str | None = None
    limit: str | None = None
    page: str | None = None
    popular: bool = False
    urls: bool = False
    extra: list[str] = field(default_factory=list)


def parse_args(argv: list[str]) -> CliArgs:
    args = CliArgs()
    words: list[str] = []
    it = iter(argv)
    for token in it:
        if token in _VALUE_FLAGS:
            value = next(it, None)
            if value is None:
                raise UsageError(f"{token} needs a value")
            setattr(args, token[2:], value)
        elif token == "--popular":
            args.popular = True
        elif token == "--urls":
            args.urls = True
        elif token.startswith("--"):
            raise UsageError(f"unknown option {token}")
        else:
            words.append(token)
    args.query = " ".join(words).strip()

    if args.popular and args.urls:
        raise UsageError("--popular and --urls are exclusive")
    if not args.popular and not args.query:
        raise UsageError("a query is required")
    return args


def main() -> None:
    try:
        args = parse_args(sys.argv[1:])
    except UsageError as e:
        if len(sys.argv) > 1:
            print(f"Error: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    try:
        output = asyncio.run(_run(args))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(output)


async def _run(args: CliArgs) -> str:
    from model_search import search
    from model_search.config import load_config
    from model_search.services.aggregator import Aggregator, parse_sites
    from model_search.sources.factory import create_sources
    from model_search.sources.http import create_client

    config = load_config()
    if not (args.popular or args.urls):
        result = await search(
            args.query,
            sites=parse_sites(args.sites),
            limit=args.limit,
            page=args.page,
            config=config,
        )
        return result.model_dump_json(indent=2)

    async with create_client(config.request_timeout_s) as client:
        aggregator = Aggregator(create_sources(client, config))
        if args.urls:
            links = {
                source.source_name.value: source.search_page_url(args.query)
                for source in aggregator.select(parse_sites(args.sites))
            }
            return json.dumps(links, indent=2)
        results = await aggregator.aggregate(
            parse_sites(args.sites), popular=True, limit=args.limit
        )
    listing = {
        site.value: [r.model_dump(mode="json") for r in records]
        for site, records in results.items()
    }
    return json.dumps(listing, indent=2)


if __name__ == "__main__":
    main()

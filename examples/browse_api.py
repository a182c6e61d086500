#!/usr/bin/env python3
"""Example: Walking a Siren API with siren-nav.

Follows a chain of relations from an API's entry point and prints what
it finds at the end, optionally fanning out over every match of the
last relation.

Usage:
  # Follow "orders", then the first "item"
  uv run python examples/browse_api.py https://api.example.com/ orders item --first

  # Every "item" of "orders", as JSON
  uv run python examples/browse_api.py https://api.example.com/ orders --each item

  # Show the trace of every relation lookup
  uv run python examples/browse_api.py https://api.example.com/ orders --debug
"""

import argparse
import asyncio
import json
import logging

import httpx

from siren_nav import NavigationError, Navigator, TransportConfig


async def main(url: str, rels: list[str], each: str | None, first: bool, debug: bool) -> None:
    print(f"Entry point: {url}")
    print(f"Relations: {' -> '.join(rels) or '(none)'}")
    print()

    api = Navigator.connect(url, config=TransportConfig(base_url=url, timeout=10.0))
    nav = api
    for rel in rels:
        nav = nav.follow(rel, first)

    try:
        if each:
            docs = await nav.follow_each(each).get(debug).siren()
            print(f"=== {len(docs)} resources via '{each}' ===")
            for doc in docs:
                print(f"  [{', '.join(doc.class_)}] {doc.title or doc.self_href or ''}")
                print(f"    {json.dumps(doc.properties)}")
        else:
            print(f"=== {await nav.get_url(debug)} ===")
            doc = await nav.get(debug).siren()
            print(json.dumps(doc.to_json_dict(), indent=2))
    except NavigationError as e:
        print(f"Navigation failed: {e}")
    except httpx.HTTPError as e:
        print(f"HTTP error: {type(e).__name__}: {e}")
    finally:
        await api.aclose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Walk a Siren hypermedia API")
    parser.add_argument("url", help="API entry point")
    parser.add_argument("rels", nargs="*", help="Relations to follow in order")
    parser.add_argument("--each", default=None, help="Fan out over every match of this relation")
    parser.add_argument("--first", action="store_true", help="Take the first of several matches")
    parser.add_argument("--debug", action="store_true", help="Trace relation lookups")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.debug else logging.WARNING)
    asyncio.run(main(args.url, args.rels, args.each, args.first, args.debug))

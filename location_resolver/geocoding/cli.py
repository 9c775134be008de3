#!/usr/bin/env python3
"""
Command-line interface for the location resolver.

Usage:
    python -m location_resolver.geocoding.cli --query "Austin"
    python -m location_resolver.geocoding.cli --query "Paris" --alternatives
    python -m location_resolver.geocoding.cli --query "Mami" --fuzzy
    python -m location_resolver.geocoding.cli --compare "San Francisco"
"""

import argparse
import asyncio
import logging
from typing import Optional

from location_resolver.geocoding.base import GeocodeOptions, GeocodeResult
from location_resolver.geocoding.facade import build_resolver, compare_providers

logger = logging.getLogger(__name__)


def print_result(result: GeocodeResult, verbose: bool = False, indent: str = "  ") -> None:
    print(f"{indent}Location:   {result.location}")
    print(f"{indent}Lat/Lng:    {result.coordinates.lat:.6f}, {result.coordinates.lng:.6f}")
    print(f"{indent}Matched:    {result.display_name}")
    print(f"{indent}Confidence: {result.confidence:.2f}")
    print(f"{indent}Type:       {result.type.value}")
    if verbose:
        print(f"{indent}Country:    {result.components.country} ({result.components.country_code})")
        print(f"{indent}Providers:  {', '.join(result.providers)}")


async def resolve_query(
    query: str,
    country: Optional[str] = None,
    alternatives: bool = False,
    verbose: bool = False,
) -> None:
    """Resolve a single place name through the provider chain."""
    print(f"\nResolving: {query}")
    print("-" * 50)

    resolver = build_resolver()
    options = GeocodeOptions(preferred_country=country, include_alternatives=alternatives)
    result = await resolver.resolve(query, options)

    if result:
        print("✓ Success!")
        print_result(result, verbose)
        if result.alternatives:
            print("\nDid you mean:")
            for alt in result.alternatives:
                print(f"  - {alt.display_name} ({alt.confidence:.2f})")
    else:
        print("✗ No match found (try --fuzzy)")

    if verbose:
        print(f"\nCache: {resolver.cache_stats()}")


async def resolve_fuzzy_query(
    query: str,
    country: Optional[str] = None,
    verbose: bool = False,
) -> None:
    """Resolve a place name, trying typo corrections."""
    print(f"\nFuzzy resolving: {query}")
    print("-" * 50)

    resolver = build_resolver()
    results = await resolver.resolve_fuzzy(query, GeocodeOptions(preferred_country=country))

    if not results:
        print("✗ No match found")
        return

    for i, result in enumerate(results, 1):
        print(f"\n{i}.")
        print_result(result, verbose)


async def compare_query(query: str, verbose: bool = False) -> None:
    """Compare resolution results from every configured provider."""
    print(f"\nComparing providers for: {query}")
    print("=" * 60)

    results = await compare_providers(query)

    for provider, result in results.items():
        print(f"\n{provider.upper()}:")
        if result:
            print_result(result, verbose)
        else:
            print("  No match")


def main():
    parser = argparse.ArgumentParser(
        description="Location resolution CLI for travel search"
    )

    parser.add_argument(
        "--query", "-q",
        type=str,
        help="Resolve a single place name"
    )
    parser.add_argument(
        "--fuzzy", "-f",
        action="store_true",
        help="Try typo corrections (with --query)"
    )
    parser.add_argument(
        "--alternatives", "-a",
        action="store_true",
        help="Look up same-name places in other countries (with --query)"
    )
    parser.add_argument(
        "--country",
        type=str,
        help="Preferred ISO country code, e.g. us, fr"
    )
    parser.add_argument(
        "--compare", "-c",
        type=str,
        help="Compare all providers for a place name"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.compare:
        asyncio.run(compare_query(args.compare, args.verbose))
    elif args.query and args.fuzzy:
        asyncio.run(resolve_fuzzy_query(args.query, args.country, args.verbose))
    elif args.query:
        asyncio.run(resolve_query(args.query, args.country, args.alternatives, args.verbose))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

"""
Passless Demo Application

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

This demo shows:
- Google and Yandex authorization URLs for the configured clients
- Passkey registration options as the browser would receive them
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from passless.core.passless import Passless
from passless.errors import PasslessError
from passless.passkey import options_to_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="passless-demo",
        description="Print OAuth authorization URLs and sample passkey options.",
    )
    parser.add_argument("--client-id", help="Client id used for both providers")
    parser.add_argument("--redirect-uri", default="http://localhost:3000/callback",
                        help="Redirect URI used for both providers")
    parser.add_argument("--state", default="", help="Opaque state parameter")
    parser.add_argument("--rp-id", default="localhost", help="Relying party id")
    parser.add_argument("--origin", default="http://localhost:3000", help="Relying party origin")
    parser.add_argument("--user-id", default="user-123")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


async def run(args: argparse.Namespace) -> int:
    """Demo body; returns the process exit code."""
    oauth = {"redirect_uri": args.redirect_uri}
    if args.client_id:
        oauth["client_id"] = args.client_id

    async with Passless({
        "google": oauth,
        "yandex": oauth,
        "passkey": {"rp_id": args.rp_id, "origin": args.origin},
    }) as passless:
        print("Passless Demo")
        print("=" * 50)
        print()

        for provider in ("google", "yandex"):
            print(f"{provider.capitalize()} OAuth")
            print("-" * 40)
            try:
                print(passless.get_auth_url(provider, args.state))
            except PasslessError as e:
                print(f"✗ {e}")
            print()

        print("Passkey registration options")
        print("-" * 40)
        try:
            options = await passless.create_passkey_registration_options(
                args.user_id, f"{args.user_id}@example.com", "Demo User"
            )
        except PasslessError as e:
            print(f"✗ {e}")
            return 1
        print(options_to_json(options))
        print()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\nDemo interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())

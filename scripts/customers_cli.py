#!/usr/bin/env python3
"""List, add and delete customers from the command line.

Usage
-----
Point the tool at the API and run::

    export CUSTOMERS_BASE_URL="http://localhost:3000"
    python scripts/customers_cli.py list
    python scripts/customers_cli.py add --first-name Ada --last-name Lovelace --email ada@example.com
    python scripts/customers_cli.py delete ada@example.com

Options::

    --verbose, -v        Enable debug logging
    --trace              Log redacted request/response bodies (implies -v)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pycustomers import Customer, CustomersClient, CustomersConfig, Failure, ResourceSnapshot


def _render(snapshot: ResourceSnapshot[list[Customer]]) -> str:
    customers = snapshot.value or []
    lines = [f"{len(customers)} Customers"]
    for customer in customers:
        lines.append(f"  {customer.display_name} <{customer.email}>")
    if snapshot.error is not None:
        lines.append(f"Error: {snapshot.error.message}")
    return "\n".join(lines)


async def _list(client: CustomersClient) -> int:
    snapshot = await client.get_customers()
    print(_render(snapshot))
    return 1 if snapshot.error is not None else 0


async def _add(client: CustomersClient, args: argparse.Namespace) -> int:
    result = await client.create_customer(
        first_name=args.first_name,
        last_name=args.last_name,
        business_name=args.business_name or "",
        email=args.email,
    )
    if isinstance(result, Failure):
        print(result.message, file=sys.stderr)
        return 1
    print(_render(result.value))
    return 0


async def _delete(client: CustomersClient, args: argparse.Namespace) -> int:
    if not args.yes:
        answer = input(f"Are you sure you want to delete customer with email: {args.email}? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            return 0
    result = await client.remove_customer(args.email)
    if isinstance(result, Failure):
        print(result.message, file=sys.stderr)
        return 1
    print(_render(result.value))
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Manage customers through the customers API.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--trace", action="store_true", help="Log redacted request/response bodies")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List customers")

    add = sub.add_parser("add", help="Add a customer")
    add.add_argument("--first-name", required=True)
    add.add_argument("--last-name", required=True)
    add.add_argument("--business-name", help="Optional business name")
    add.add_argument("--email", required=True)

    delete = sub.add_parser("delete", help="Delete a customer by e-mail")
    delete.add_argument("email")
    delete.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    args = parser.parse_args()

    if args.verbose or args.trace:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = CustomersConfig.from_env(**({"api_trace_enabled": True} if args.trace else {}))

    async with CustomersClient(config) as client:
        if args.command == "list":
            return await _list(client)
        if args.command == "add":
            return await _add(client, args)
        return await _delete(client, args)


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

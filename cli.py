#!/usr/bin/env python3
"""Simple CLI for inspecting the orderbook locally"""

import argparse
import asyncio
import json
import sys
from decimal import Decimal

from orderbook.core.chains import parse_chain_id
from orderbook.core.execution.errors import OrderbookError
from orderbook.core.orderbook import Orderbook
from orderbook.logging_config import setup_logging
from orderbook.providers.marketplace import get_marketplace_client
from orderbook.providers.rpc import JsonRpcProvider
from orderbook.config import settings


def print_order(kind: str, order):
    """Pretty print a marketplace order"""
    if order is None:
        print(f"❌ {kind} not found")
        return

    parameters = order.order.parameters
    print(f"\n📄 {kind} {order.order_id}")
    print("=" * 50)
    print(f"Offerer:    {parameters.get('offerer')}")
    print(f"Zone:       {parameters.get('zone')}")
    print(f"End time:   {parameters.get('endTime')}")
    print(f"Offer:      {len(parameters.get('offer') or [])} item(s)")
    print(f"Consider.:  {len(parameters.get('consideration') or [])} item(s)")
    if order.extra_data:
        print(f"Extra data: {order.extra_data[:20]}...")


async def cli_currencies(book: Orderbook, chain_id: str, contract: str, orderbook: str):
    """List currencies accepted for a collection"""
    currencies = await book.get_supported_currencies(chain_id, contract, orderbook)
    if not currencies:
        print("No supported currencies")
        return

    print(f"\n💱 Currencies on {orderbook} ({chain_id})")
    print("-" * 50)
    for i, currency in enumerate(currencies, 1):
        print(f"{i:2d}. {currency.symbol:<8} {currency.contract_address} ({currency.decimals} decimals)")


async def cli_fees(book: Orderbook, chain_id: str, contract: str, orderbook: str):
    """List marketplace fees for a collection"""
    fees = await book.get_orderbook_fee(chain_id, contract, orderbook)
    if not fees:
        print("No marketplace fees")
        return

    print(f"\n💸 Fees on {orderbook} ({chain_id})")
    print("-" * 50)
    for fee in fees:
        percent = Decimal(fee.basis_points) / Decimal(100)
        print(f"{fee.fee_type:<12} {percent:>6}%  -> {fee.recipient}")


async def cli_balance(chain_id: str, address: str, token: str = None):
    """Show native (or ERC20) balance of an address"""
    rpc_url = settings.rpc_urls.get(chain_id)
    if not rpc_url:
        print(f"❌ No RPC URL configured for {chain_id}")
        return

    provider = JsonRpcProvider(rpc_url, parse_chain_id(chain_id))
    try:
        if token:
            balance = await provider.erc20_balance_of(token, address)
        else:
            balance = await provider.get_balance(address)
    finally:
        await provider.close()

    unit = token or "native"
    print(f"{address}: {balance} wei ({unit})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Domain Orderbook CLI")
    parser.add_argument("--json", action="store_true", help="Print raw JSON where available")
    subparsers = parser.add_subparsers(dest="command")

    for name, help_text in (("currencies", "List supported currencies"), ("fees", "List marketplace fees")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("chain_id", help="CAIP-2 chain id, e.g. eip155:97476")
        sub.add_argument("contract", help="Token contract address")
        sub.add_argument("--orderbook", default="DOMA", help="Orderbook (default: DOMA)")

    for name in ("listing", "offer"):
        sub = subparsers.add_parser(name, help=f"Show a {name}")
        sub.add_argument("order_id", help="Marketplace order ID")
        sub.add_argument("fulfiller", help="Address that would fulfil the order")

    balance_parser = subparsers.add_parser("balance", help="Show wallet balance")
    balance_parser.add_argument("chain_id", help="CAIP-2 chain id")
    balance_parser.add_argument("address", help="Wallet address")
    balance_parser.add_argument("--token", help="ERC20 contract (default: native balance)")

    return parser


async def main():
    parser = build_parser()
    args = parser.parse_args()
    setup_logging()

    if not args.command:
        parser.print_help()
        return

    command = args.command.lower()
    client = get_marketplace_client()
    book = Orderbook(api_client=client)

    try:
        if command == "currencies":
            await cli_currencies(book, args.chain_id, args.contract, args.orderbook)

        elif command == "fees":
            await cli_fees(book, args.chain_id, args.contract, args.orderbook)

        elif command in ("listing", "offer"):
            fetch = client.get_listing if command == "listing" else client.get_offer
            order = await fetch(args.order_id, args.fulfiller)
            if args.json and order is not None:
                print(json.dumps(order.model_dump(by_alias=True), indent=2))
            else:
                print_order(command.title(), order)

        elif command == "balance":
            await cli_balance(args.chain_id, args.address, args.token)

        else:
            print(f"❌ Unknown command: {command}")
            parser.print_help()

    except OrderbookError as e:
        print(f"❌ {e.code.value}: {e.message}")
        sys.exit(1)
    finally:
        await client.close()


def cli_entry():
    asyncio.run(main())


if __name__ == "__main__":
    cli_entry()

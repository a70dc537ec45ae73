#!/usr/bin/env python3
import click
import requests
from typing import Any, Dict, List, Optional
from .client import AuctionClient, BidFailed
from .config import save_token
import sys

FAILURE_MESSAGES = {
    "not_found": "Item not found",
    "closed": "Auction is closed",
    "locked": "Item is locked after a recent bid, try again shortly",
    "self_bid": "You already hold the highest bid",
    "version_conflict": "Someone else bid first; refresh and decide again",
}


def build_separator(left, middle, right, widths):
    return left + middle.join("─" * (w + 2) for w in widths) + right


def print_table(headers: List[str], rows: List[List[str]]):
    col_widths = [
        max([len(headers[i])] + [len(row[i]) for row in rows])
        for i in range(len(headers))
    ]
    click.echo(build_separator("┌", "┬", "┐", col_widths))
    click.echo("│ " + " │ ".join(f"{headers[i]:<{col_widths[i]}}" for i in range(len(headers))) + " │")
    click.echo(build_separator("├", "┼", "┤", col_widths))
    for row in rows:
        click.echo("│ " + " │ ".join(f"{row[i]:<{col_widths[i]}}" for i in range(len(row))) + " │")
    click.echo(build_separator("└", "┴", "┘", col_widths))


def format_item_row(client: AuctionClient, item: Dict[str, Any]) -> List[str]:
    locked_until = "-"
    if item["is_locked"] and item.get("lock_expires_at"):
        locked_until = client.to_local_time(item["lock_expires_at"])
    return [
        str(item["id"]),
        item["name"],
        str(item["current_bid"]),
        item.get("last_bidder") or "-",
        str(item["version"]),
        locked_until,
    ]


def echo_item(client: AuctionClient, item: Dict[str, Any]):
    headers = ["ID", "Name", "Current Bid", "Last Bidder", "Version", "Locked Until (Local)"]
    print_table(headers, [format_item_row(client, item)])


@click.group()
def cli():
    """Auction Hub bidder CLI"""
    pass


@cli.command()
@click.option("--username", prompt="Username")
@click.option("--password", prompt="Password", hide_input=True)
@click.option("--display-name", default=None, help="Name shown to other bidders")
def auth(username, password, display_name):
    """Authenticate with the server."""
    try:
        client = AuctionClient()
        token = client.authenticate(username, password, display_name)
        save_token(token)
        click.echo("Authentication successful!")
    except Exception as e:
        click.echo(f"Authentication failed: {e}", err=True)
        sys.exit(1)


@cli.command("list")
def list_items():
    """List all auction items."""
    try:
        client = AuctionClient()
        items = client.list_auctions()
    except requests.exceptions.RequestException as e:
        click.echo(f"Failed to list auctions: {e}", err=True)
        sys.exit(1)

    if not items:
        click.echo("No auctions available.")
        return

    headers = ["ID", "Name", "Current Bid", "Last Bidder", "Version", "Locked Until (Local)"]
    print_table(headers, [format_item_row(client, item) for item in items])


@cli.command()
@click.argument("item_id", type=int)
def show(item_id):
    """Show one auction item."""
    client = AuctionClient()
    try:
        echo_item(client, client.get_auction(item_id))
    except BidFailed as e:
        click.echo(FAILURE_MESSAGES.get(e.code, e.code), err=True)
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        click.echo(f"Failed to fetch item {item_id}: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("item_id", type=int)
@click.option("--version", "version", type=int, default=None,
              help="Item version you last saw (fetched from the server if omitted)")
def bid(item_id, version: Optional[int]):
    """Bid one increment on an item."""
    client = AuctionClient()
    failed = False
    try:
        if version is None:
            version = client.get_auction(item_id)["version"]
        item = client.place_bid(item_id, version)
        click.echo(f"Bid accepted! Current bid is now {item['current_bid']}.")
    except BidFailed as e:
        failed = True
        click.echo(f"Bid rejected: {FAILURE_MESSAGES.get(e.code, e.code)}", err=True)
        if e.code == "not_found":
            sys.exit(1)
    except (ValueError, requests.exceptions.RequestException) as e:
        click.echo(f"Failed to place bid: {e}", err=True)
        sys.exit(1)

    # Always reconcile with the server's state after an attempt
    try:
        echo_item(client, client.get_auction(item_id))
    except (BidFailed, requests.exceptions.RequestException) as e:
        click.echo(f"Failed to refresh item {item_id}: {e}", err=True)
        failed = True

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()

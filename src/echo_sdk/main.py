"""Command line interface for the Echo control plane."""

import argparse
import asyncio
import logging
import sys

from .client import EchoClient
from .config import get_settings, setup_logging
from .consts import DEFAULT_PAYMENT_DESCRIPTION, PACKAGE_VERSION
from .errors import get_user_friendly_message
from .exceptions import EchoError

logger = logging.getLogger("echo-sdk.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="echo-sdk",
        description="Manage your Echo applications from the command line. "
        "Authenticates with ECHO_API_KEY.",
    )
    parser.add_argument("--version", action="version", version=PACKAGE_VERSION)
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("apps", help="List your Echo applications")

    app = commands.add_parser("app", help="Show one Echo application")
    app.add_argument("app_id")

    commands.add_parser("balance", help="Show your account balance")

    payment = commands.add_parser("payment", help="Create a payment link")
    payment.add_argument("-a", "--amount", type=float, required=True)
    payment.add_argument("-d", "--description", default=DEFAULT_PAYMENT_DESCRIPTION)

    url = commands.add_parser("url", help="Print the dashboard URL of an app")
    url.add_argument("app_id")

    commands.add_parser("models", help="List models the router can bill for")

    return parser


async def run(args: argparse.Namespace, client: EchoClient) -> None:
    """Execute one parsed command against ``client``."""
    if args.command == "apps":
        apps = await client.apps.list_echo_apps()
        if not apps:
            print("No Echo apps found. Create one first!")
            return
        print(f"Found {len(apps)} Echo app(s):")
        for index, app in enumerate(apps, start=1):
            status = "Active" if app.is_active else "Inactive"
            print(f"{index}. {app.name} ({app.id}) - {status}")
            if app.description:
                print(f"   {app.description}")

    elif args.command == "app":
        app = await client.apps.get_echo_app(args.app_id)
        print(app.model_dump_json(indent=2, by_alias=True))

    elif args.command == "balance":
        balance = await client.balance.get_balance()
        print(f"Balance: ${balance.balance:.2f}")
        print(f"Total Credits: ${balance.total_credits:.2f}")
        print(f"Total Spent: ${balance.total_spent:.2f}")

    elif args.command == "payment":
        if args.amount <= 0:
            raise EchoError("Amount must be greater than zero")
        url = await client.payments.get_payment_url(args.amount, args.description)
        print(f"Payment link: {url}")

    elif args.command == "url":
        print(client.apps.get_app_url(args.app_id))

    elif args.command == "models":
        for model in await client.models.list_supported_models():
            print(f"{model.provider}/{model.id}")


async def _run_with_client(args: argparse.Namespace) -> None:
    async with EchoClient() as client:
        await run(args, client)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(get_settings().log_level)
    logger.debug(f"Running command {args.command}")

    try:
        asyncio.run(_run_with_client(args))
    except EchoError as e:
        logger.debug(f"Command failed: {e!r}")
        print(f"Error: {get_user_friendly_message(e)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

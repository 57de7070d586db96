"""Command line entry point driving the secrets page against a live server."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from .api.client import ApiClient
from .api.gateway import SecretsGateway
from .auth.tokens import StaticTokenProvider
from .config import ClientConfig
from .page.controller import PageController
from .page.form import SecretFormValues
from .page.view import build_page_view, render_text

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secrets-console",
        description="List, create and decrypt secrets stored by the secrets API.",
    )
    parser.add_argument("--base-url", help="API server URL (default: $SECRETS_API_BASE_URL)")
    parser.add_argument("--token", help="Bearer token (default: $SECRETS_API_ACCESS_TOKEN)")
    parser.add_argument(
        "--retain-decrypted",
        action="store_true",
        default=None,
        help="Keep decrypted values across list refreshes",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("list", help="Show all secrets (default)")

    create = subparsers.add_parser("create", help="Create a secret")
    _add_value_arguments(create)

    decrypt = subparsers.add_parser("decrypt", help="Decrypt one or more secrets")
    decrypt.add_argument("ids", nargs="+", metavar="ID")

    update = subparsers.add_parser("update", help="Replace a secret's name, description and value")
    update.add_argument("id", metavar="ID")
    _add_value_arguments(update)

    delete = subparsers.add_parser("delete", help="Delete a secret")
    delete.add_argument("id", metavar="ID")
    return parser


def _add_value_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", required=True)
    parser.add_argument("--description", default="")
    parser.add_argument("--value", required=True, dest="secret_value")


async def run_command(controller: PageController, args: argparse.Namespace) -> bool:
    """Mount the page, then apply the requested action."""

    if not await controller.mount():
        return False

    command = args.command or "list"
    if command == "create":
        controller.form.open()
        controller.form.fill(
            name=args.name, description=args.description, secret_value=args.secret_value
        )
        return await controller.form.submit() is not None
    if command == "decrypt":
        tasks = [controller.start_decrypt(secret_id) for secret_id in args.ids]
        results = await asyncio.gather(*tasks)
        return all(results)
    if command == "update":
        values = SecretFormValues(
            name=args.name, description=args.description, secret_value=args.secret_value
        )
        return await controller.update_secret(args.id, values) is not None
    if command == "delete":
        return await controller.delete_secret(args.id)
    return True


async def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log_level_name = os.getenv("SECRETS_CONSOLE_LOG_LEVEL", "WARNING").upper()
    log_level = getattr(logging, log_level_name, logging.WARNING)
    logging.basicConfig(level=log_level, stream=sys.stderr)

    overrides: dict[str, object] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.retain_decrypted is not None:
        overrides["retain_decrypted_on_refresh"] = args.retain_decrypted
    try:
        config = ClientConfig(**overrides)  # pyright: ignore[reportArgumentType]
    except ValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 2

    token_provider = StaticTokenProvider(args.token or config.access_token)
    async with ApiClient(config) as client:
        controller = PageController(
            SecretsGateway(client),
            token_provider,
            retain_decrypted_on_refresh=config.retain_decrypted_on_refresh,
        )
        ok = await run_command(controller, args)
        print(render_text(build_page_view(controller)))

    logger.debug("Command finished", extra={"command": args.command, "ok": ok})
    return 0 if ok else 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()

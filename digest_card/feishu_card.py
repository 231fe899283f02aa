"""
Feishu Card Generator
This script reads the markdown output of the AI daily digest, converts it
into a Feishu interactive card and either saves, prints or posts it.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from digest_card.exceptions import ConfigError
from digest_card.parsers.markdown import MarkdownDigestParser
from digest_card.services.card_builder import build_card
from digest_card.services.feishu_service import FeishuService

logger = logging.getLogger(__name__)

USAGE = (
    "Usage: digest-card --input <digest.md> [--output <card.json>] "
    "[--webhook <url>] [--user-id <id>] [--report-url <url>]"
)


def configure_logging(debug: bool = False) -> None:
    """Sends log records to stderr so stdout only carries the card."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Loads configuration from a JSON file."""
    if config_path is None:
        # Build absolute path relative to this script
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "config.json")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found at %s. Using empty config.", config_path)
        return {}
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_path} must hold a JSON object.")
    return config


def resolve_settings(args: argparse.Namespace, config: Dict[str, Any]) -> Dict[str, Any]:
    """Merges CLI flags over environment variables over the config file."""
    return {
        "webhook": args.webhook
        or os.environ.get("FEISHU_WEBHOOK")
        or config.get("webhook"),
        "user_id": args.user_id
        or os.environ.get("FEISHU_USER_ID")
        or config.get("user_id"),
        "report_url": args.report_url
        or os.environ.get("DIGEST_REPORT_URL")
        or config.get("report_url"),
        "request_timeout": config.get("request_timeout"),
    }


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="digest-card",
        description="Convert an AI daily digest markdown file into a Feishu card.",
    )
    parser.add_argument("--input", help="Path to the digest markdown file.")
    parser.add_argument("--output", help="Write the card JSON to this path.")
    parser.add_argument("--webhook", help="Feishu bot webhook URL to post the card to.")
    parser.add_argument("--user-id", help="Recipient user id (logged only).")
    parser.add_argument("--report-url", help="Link for the 'full report' button.")
    parser.add_argument("--config", help="Path to a JSON config file.")
    parser.add_argument(
        "--debug", action="store_true", help="Enable verbose debug logging."
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    """Reads, parses, builds and delivers one card."""
    settings = resolve_settings(args, load_config(args.config))

    with open(args.input, "r", encoding="utf-8") as f:
        markdown = f.read()

    record = MarkdownDigestParser().parse(markdown)
    card = build_card(record, settings["report_url"])
    card_json = json.dumps(card, ensure_ascii=False, indent=2)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(card_json)
        logger.info("Card saved to: %s", args.output)

    if settings["webhook"]:
        service = FeishuService(settings["webhook"], settings["request_timeout"])
        service.send_card(card, settings["user_id"])

    if not args.output and not settings["webhook"]:
        print(card_json)


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution entry point."""
    args = parse_args(argv)
    configure_logging(args.debug)

    if not args.input:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        run(args)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

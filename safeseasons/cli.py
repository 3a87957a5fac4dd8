# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Command line entry point: ``safeseasons {regions,tips,ask,plan,chat}``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, TextIO

from safeseasons.ask.chat import ChatController
from safeseasons.ask.cleaner import clean_response
from safeseasons.ask.extended import RuleBasedExtendedFeatures
from safeseasons.ask.llm import aclose_http_client
from safeseasons.ask.service import build_orchestrator, build_tips_service
from safeseasons.ask.types import AskContext, ProviderError
from safeseasons.catalog.regions import Region, current_month, load_hazard_catalog, normalize_month
from safeseasons.config import default_region

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROVIDER_ERROR = 1
EXIT_BAD_INPUT = 2


class _BadInput(Exception):
    pass


def _resolve_region(code: Optional[str], required: bool = False) -> Optional[Region]:
    code = (code or default_region() or "").strip()
    if not code:
        if required:
            raise _BadInput("a region code is required (--region or SAFESEASONS_DEFAULT_REGION)")
        return None
    region = load_hazard_catalog().region(code)
    if region is None:
        raise _BadInput(f"unknown region code: {code}")
    return region


def _resolve_month(raw: Optional[str]) -> str:
    if not raw:
        return current_month()
    month = normalize_month(raw)
    if month is None:
        raise _BadInput(f"unknown month: {raw}")
    return month


def _cmd_regions(args: argparse.Namespace, out: TextIO) -> int:
    for region in load_hazard_catalog().all_regions():
        out.write(f"{region.code}\t{region.name}\t{region.risk.label}\n")
    return EXIT_OK


def _cmd_tips(args: argparse.Namespace, out: TextIO) -> int:
    region = _resolve_region(args.region, required=True)
    month = _resolve_month(args.month)
    tips = build_tips_service().tips(region, month)
    if not tips:
        out.write(f"No tips for {region.name} in {month}.\n")
        return EXIT_OK
    out.write(f"This month in {region.name} ({month}):\n")
    for tip in tips:
        out.write(f"• {tip}\n")
    return EXIT_OK


async def _ask(args: argparse.Namespace, out: TextIO) -> int:
    context = AskContext(region=_resolve_region(args.region), month=_resolve_month(args.month))
    orchestrator = build_orchestrator(word_delay=None if args.stream else 0.0)
    try:
        if args.stream:
            async for chunk in orchestrator.stream_ask(args.question, context):
                out.write(chunk)
                out.flush()
            out.write("\n")
        else:
            answer = await orchestrator.answer(args.question, context)
            text = clean_response(answer.text) if answer.used_preferred else answer.text
            out.write(text + "\n")
    except ProviderError as exc:
        logger.error("Answer failed: %s", exc)
        return EXIT_PROVIDER_ERROR
    finally:
        await aclose_http_client()
    return EXIT_OK


def _cmd_plan(args: argparse.Namespace, out: TextIO) -> int:
    context = AskContext(region=_resolve_region(args.region), month=current_month())
    plan = RuleBasedExtendedFeatures().preparedness_plan(args.question, context)
    out.write(f"{plan.disaster_type} plan (urgency: {plan.urgency})\n\nSteps:\n")
    for step in plan.steps:
        out.write(f"• {step}\n")
    out.write(f"\nSupplies: {', '.join(plan.supplies)}\n")
    return EXIT_OK


async def _chat(args: argparse.Namespace, out: TextIO, inp: TextIO) -> int:
    region = _resolve_region(args.region)
    controller = ChatController(build_orchestrator(), region_getter=lambda: region)

    def _echo(chunk: str) -> None:
        out.write(chunk)
        out.flush()

    try:
        for line in inp:
            if line.strip().lower() in {"quit", "exit"}:
                break
            record = await controller.send_streaming(line, on_chunk=_echo)
            if record is None:
                continue
            out.write("\n" if controller.last_error is None else f"{record.content}\n")
            out.flush()
    finally:
        await aclose_http_client()
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="safeseasons", description="Offline seasonal disaster-preparedness guidance.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("regions", help="List known regions")

    p_tips = sub.add_parser("tips", help="Show this month's tips for a region")
    p_tips.add_argument("--region", default=None, help="Region code, e.g. TX")
    p_tips.add_argument("--month", default=None, help="Month name (default: current month)")

    p_ask = sub.add_parser("ask", help="Ask a preparedness question")
    p_ask.add_argument("question")
    p_ask.add_argument("--region", default=None)
    p_ask.add_argument("--month", default=None)
    p_ask.add_argument("--stream", action="store_true", help="Print the answer as it is generated")

    p_plan = sub.add_parser("plan", help="Print a rule-based preparedness plan")
    p_plan.add_argument("question")
    p_plan.add_argument("--region", default=None)

    p_chat = sub.add_parser("chat", help="Read questions from stdin, one per line")
    p_chat.add_argument("--region", default=None)
    return parser


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None, inp: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    out = out or sys.stdout
    try:
        if args.command == "regions":
            return _cmd_regions(args, out)
        if args.command == "tips":
            return _cmd_tips(args, out)
        if args.command == "ask":
            return asyncio.run(_ask(args, out))
        if args.command == "plan":
            return _cmd_plan(args, out)
        if args.command == "chat":
            return asyncio.run(_chat(args, out, inp or sys.stdin))
    except _BadInput as exc:
        logger.error("%s", exc)
        return EXIT_BAD_INPUT
    return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())

"""proposalkit CLI — inspect instruction types and assemble proposals offline.

Usage::

    proposalkit types
    proposalkit types --kind program_governance_v2 --index 1
    proposalkit plan proposal.json
    proposalkit plan proposal.json --draft --json
    proposalkit config

Configuration is read from ``~/.proposalkit/config.json``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

from proposalkit.composer import Notification, ProposalComposer
from proposalkit.config import DEFAULT_BASE_DIR, ComposerConfig, load_config
from proposalkit.eligibility import allowed_types
from proposalkit.errors import (
    DownstreamError,
    StateError,
    UserInputError,
    ValidationFailed,
)
from proposalkit.instructions import InstructionTypeRegistry
from proposalkit.logging_config import setup_logging
from proposalkit.offline import OfflineProposalCreator
from proposalkit.plan import apply_plan, build_governance_book, load_plan
from proposalkit.types import Governance, GovernanceAccountType
from proposalkit.units import get_days_from_timestamp

__all__ = ["build_parser", "main"]


# ── ANSI color support ───────────────────────────────────────────────────


def _colors_enabled() -> bool:
    return sys.stdout.isatty() and not os.environ.get("NO_COLOR")


def _c(code: str, text: str) -> str:
    return text if not _colors_enabled() else f"\033[{code}m{text}\033[0m"


def _bold(t: str) -> str:
    return _c("1", t)


def _green(t: str) -> str:
    return _c("32", t)


def _red(t: str) -> str:
    return _c("31", t)


def _dim(t: str) -> str:
    return _c("2", t)


def _fail(message: str) -> None:
    print(_red(message), file=sys.stderr)
    sys.exit(1)


# ── Commands ─────────────────────────────────────────────────────────────


def _cmd_types(args: argparse.Namespace, config: ComposerConfig) -> None:
    registry = InstructionTypeRegistry.with_defaults(
        available_after_program_governance=config.program_governance_allow_list,
    )
    governance = None
    if args.kind:
        try:
            kind = GovernanceAccountType.parse(args.kind)
        except ValueError as exc:
            _fail(str(exc))
        governance = Governance(pubkey="cli", account_type=kind)

    types = allowed_types(args.index, registry, governance)
    if args.json:
        print(json.dumps([
            {
                "id": t.id,
                "name": t.name,
                "available_after_program_governance": t.available_after_program_governance,
            }
            for t in types
        ], indent=2))
        return

    print(_bold(f"Instruction types for slot {args.index}") + _dim(f" ({len(types)} of {len(registry)})"))
    for t in types:
        marker = " *" if t.available_after_program_governance else ""
        print(f"  {t.id:<62} {t.name}{marker}")
    if any(t.available_after_program_governance for t in types):
        print(_dim("  * available after program governance"))


def _cmd_plan(args: argparse.Namespace, config: ComposerConfig) -> None:
    try:
        plan = load_plan(args.file)
        book = build_governance_book(plan)
    except (OSError, ValueError) as exc:
        _fail(f"Cannot read proposal document {args.file}: {exc}")

    creator = OfflineProposalCreator(book)
    notifications: list[Notification] = []
    composer = ProposalComposer(
        fetch_governance=book.fetch,
        create_proposal=creator.create,
        config=config,
        notify=notifications.append,
    )

    try:
        apply_plan(composer, plan, book)
        address = asyncio.run(composer.submit(is_draft=args.draft))
    except ValidationFailed as exc:
        for field_name, message in sorted(exc.errors.items()):
            print(_red(f"  {field_name}: {message}"), file=sys.stderr)
        for index in exc.invalid_slots:
            print(_red(f"  instruction {index + 1}: invalid"), file=sys.stderr)
        _fail("Proposal is not valid")
    except (UserInputError, StateError, DownstreamError, ValueError) as exc:
        _fail(str(exc))

    request = creator.requests[-1]
    if args.json:
        print(json.dumps({
            "address": address,
            "url": composer.proposal_url(address),
            "is_draft": request.is_draft,
            "vote_by_council": request.vote_by_council,
            "governance": request.governance.to_dict(),
            "instructions": [i.to_dict() for i in request.instructions],
        }, indent=2))
        return

    kind = "Draft" if request.is_draft else "Proposal"
    print(_green(f"{kind} assembled: {address}"))
    print(f"  Title:       {request.title}")
    print(f"  Governance:  {request.governance.pubkey}")
    print(f"  Voting body: {'council' if request.vote_by_council else 'community'}")
    print(f"  URL:         {composer.proposal_url(address)}")
    print()
    print(_bold(f"Instructions ({len(request.instructions)})"))
    for i, instruction in enumerate(request.instructions, 1):
        days = get_days_from_timestamp(instruction.hold_up_time)
        print(
            f"  {i:>3}. program {instruction.data.program_id.hex()[:16]}… "
            f"accounts={len(instruction.data.accounts)} "
            f"data={len(instruction.data.data)}B "
            f"hold-up={days:g}d"
        )


def _cmd_config(args: argparse.Namespace, config: ComposerConfig) -> None:
    print(json.dumps(config.to_dict(), indent=2))


# ── Parser ───────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proposalkit",
        description="proposalkit — compose governance proposals from instruction slots",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=DEFAULT_BASE_DIR,
        help="Base directory for proposalkit data (default: ~/.proposalkit)",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        help="Logging level (debug, info, warning, error)",
    )

    sub = parser.add_subparsers(dest="command")

    types = sub.add_parser("types", help="List instruction types selectable at a slot")
    types.add_argument("--kind", default=None, help="Governance account type of the proposal")
    types.add_argument("--index", type=int, default=0, help="Slot index (default: 0)")
    types.add_argument("--json", action="store_true", help="Output JSON")

    plan = sub.add_parser("plan", help="Assemble a proposal document without submitting it")
    plan.add_argument("file", type=Path, help="Proposal document (JSON)")
    plan.add_argument("--draft", action="store_true", help="Assemble as a draft")
    plan.add_argument("--json", action="store_true", help="Output JSON")

    sub.add_parser("config", help="Show the effective configuration")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        setup_logging(args.log_level)
    except ValueError as exc:
        _fail(str(exc))

    try:
        config = load_config(args.base_dir)
    except (OSError, ValueError) as exc:
        _fail(f"Invalid configuration in {args.base_dir}: {exc}")

    commands: dict[str, Any] = {
        "types": _cmd_types,
        "plan": _cmd_plan,
        "config": _cmd_config,
    }
    commands[args.command](args, config)


if __name__ == "__main__":
    main()

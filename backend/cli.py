"""Command-line front end for the VoteX API.

Usage examples:
    votex dashboard
    votex results
    votex connect --rpc-url http://127.0.0.1:8545
    votex vote 0 --address 0xAbC...
    votex admin add-candidate Alice
    votex admin set-restart-password s3cret!
"""

import argparse
import os
import re
import sys
from typing import Any, Callable

import messages
from api_client import ApiClientError, VotexClient
from config import ClientSettings
from wallet import WalletError, connect_wallet

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
MIN_PASSWORD_LENGTH = 6
DEFAULT_WALLET_RPC = "http://127.0.0.1:8545"


class ValidationError(ValueError):
    pass


def is_valid_address(address: str) -> bool:
    return bool(ADDRESS_RE.match(address or ""))


def require_address(address: str) -> str:
    address = (address or "").strip()
    if not address:
        raise ValidationError("Please enter a voter address")
    if not is_valid_address(address):
        raise ValidationError("Please enter a valid Ethereum address")
    return address


def require_new_password(password: str) -> str:
    if not (password or "").strip():
        raise ValidationError("Please enter a new restart password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def success(text: str) -> None:
    print(f"[ok] {text}")


def failure(text: str) -> None:
    print(f"[error] {text}", file=sys.stderr)


def _print_tx(result: dict[str, Any]) -> None:
    print(f"  tx: {result.get('txHash')}")


def _print_candidates(candidates: list[dict[str, Any]]) -> None:
    if not candidates:
        print("No candidates yet.")
        return
    for c in candidates:
        index = c.get("id", c.get("index"))
        print(f"  [{index}] {c['name']}: {c['votes']} votes")


def show_status(client: VotexClient, args: argparse.Namespace) -> int:
    st = client.get_status()
    state = "ended" if st["electionEnded"] else "active"
    print(f"Election: {st['electionName']} (round {st['electionRound']}, {state})")
    print(f"Owner: {st['owner']}")
    print(f"Total votes: {st['totalVotes']}")
    print(f"Restart password set: {'yes' if st['restartPasswordSet'] else 'no'}")
    return 0


def show_candidates(client: VotexClient, args: argparse.Namespace) -> int:
    _print_candidates(client.get_candidates())
    return 0


def show_dashboard(client: VotexClient, args: argparse.Namespace) -> int:
    show_status(client, args)
    candidates = client.get_candidates()
    print(f"Candidates: {len(candidates)}")
    _print_candidates(candidates)
    return 0


def show_results(client: VotexClient, args: argparse.Namespace) -> int:
    results = client.get_results()
    print(f"Total votes: {results['totalVotes']}")
    _print_candidates(results["candidates"])
    winner = results.get("winner")
    print(f"Leading: {winner}" if winner else "No winner yet.")
    return 0


def check_voted(client: VotexClient, args: argparse.Namespace) -> int:
    address = require_address(args.address)
    try:
        voted = client.has_voted(address)["voted"]
    except ApiClientError as exc:
        failure(messages.get_error_message(exc, messages.VOTE_STATUS_FAILED))
        return 1
    print(f"{address}: {'has voted' if voted else 'has not voted'}")
    return 0


def _eligibility(client: VotexClient, address: str) -> bool:
    voted = client.has_voted(address)["voted"]
    if voted:
        success("You have already voted!")
    else:
        success("You are eligible to vote!")
    return not voted


def connect(client: VotexClient, args: argparse.Namespace) -> int:
    try:
        address = connect_wallet(args.rpc_url)
    except WalletError as exc:
        failure(str(exc))
        return 1
    success(f"Wallet connected: {address}")
    try:
        _eligibility(client, address)
    except ApiClientError as exc:
        failure(messages.get_error_message(exc, messages.VOTE_STATUS_FAILED))
        return 1
    return 0


def vote(client: VotexClient, args: argparse.Namespace) -> int:
    if args.address:
        address = require_address(args.address)
    else:
        try:
            address = connect_wallet(args.rpc_url)
        except WalletError as exc:
            failure(str(exc))
            return 1
    if args.candidate_index < 0:
        raise ValidationError("Please select a candidate")

    try:
        if client.get_status()["electionEnded"]:
            failure("Election has ended")
            return 1
        if not _eligibility(client, address):
            failure("You have already voted or are not authorized")
            return 1
        result = client.cast_vote(args.candidate_index, address)
    except ApiClientError as exc:
        failure(messages.get_error_message(exc, messages.VOTE_FAILED))
        return 1
    success(result.get("message") or "Vote cast successfully")
    _print_tx(result)
    return 0


def _admin_action(action: Callable[[], dict[str, Any]], done: str, failed: str) -> int:
    try:
        result = action()
    except ApiClientError as exc:
        failure(messages.get_error_message(exc, failed))
        return 1
    if not result.get("success"):
        failure(failed)
        return 1
    success(done)
    _print_tx(result)
    return 0


def admin_add_candidate(client: VotexClient, args: argparse.Namespace) -> int:
    name = (args.name or "").strip()
    if not name:
        raise ValidationError("Please enter a candidate name")
    return _admin_action(lambda: client.add_candidate(name), "Candidate added successfully!", messages.CANDIDATE_FAILED)


def admin_authorize(client: VotexClient, args: argparse.Namespace) -> int:
    address = require_address(args.address)
    return _admin_action(
        lambda: client.authorize_voter(address), "Voter authorized successfully!", messages.AUTHORIZE_FAILED
    )


def admin_end(client: VotexClient, args: argparse.Namespace) -> int:
    return _admin_action(client.end_election, "Election ended successfully!", messages.ELECTION_FAILED)


def admin_restart(client: VotexClient, args: argparse.Namespace) -> int:
    if not (args.password or "").strip():
        raise ValidationError("Please enter the restart password")
    return _admin_action(
        lambda: client.restart_election(args.password), "Election restarted successfully!", messages.RESTART_FAILED
    )


def admin_set_password(client: VotexClient, args: argparse.Namespace) -> int:
    password = require_new_password(args.password)
    return _admin_action(
        lambda: client.set_restart_password(password),
        "Restart password updated successfully!",
        messages.PASSWORD_FAILED,
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="votex", description="VoteX election client")
    p.add_argument("--api-url", default=None, help="API base URL (defaults to $API_URL)")
    sub = p.add_subparsers(dest="cmd")

    sub.add_parser("dashboard").set_defaults(handler=show_dashboard)
    sub.add_parser("status").set_defaults(handler=show_status)
    sub.add_parser("candidates").set_defaults(handler=show_candidates)
    sub.add_parser("results").set_defaults(handler=show_results)

    hv = sub.add_parser("has-voted")
    hv.add_argument("address")
    hv.set_defaults(handler=check_voted)

    wallet_rpc = os.getenv("WALLET_RPC_URL", DEFAULT_WALLET_RPC)
    c = sub.add_parser("connect")
    c.add_argument("--rpc-url", default=wallet_rpc)
    c.set_defaults(handler=connect)

    v = sub.add_parser("vote")
    v.add_argument("candidate_index", type=int)
    v.add_argument("--address")
    v.add_argument("--rpc-url", default=wallet_rpc)
    v.set_defaults(handler=vote)

    admin = sub.add_parser("admin")
    admin_sub = admin.add_subparsers(dest="admin_cmd", required=True)
    a = admin_sub.add_parser("add-candidate")
    a.add_argument("name")
    a.set_defaults(handler=admin_add_candidate)
    a = admin_sub.add_parser("authorize")
    a.add_argument("address")
    a.set_defaults(handler=admin_authorize)
    admin_sub.add_parser("end").set_defaults(handler=admin_end)
    a = admin_sub.add_parser("restart")
    a.add_argument("password")
    a.set_defaults(handler=admin_restart)
    a = admin_sub.add_parser("set-restart-password")
    a.add_argument("password")
    a.set_defaults(handler=admin_set_password)
    return p


def main(argv: list[str] | None = None, client: VotexClient | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    handler = getattr(args, "handler", None)
    if handler is None:
        p.print_help()
        return 1

    if client is None:
        settings = ClientSettings.from_env()
        client = VotexClient(base_url=args.api_url or settings.api_url, timeout=settings.timeout)
    try:
        return handler(client, args)
    except ValidationError as exc:
        failure(str(exc))
        return 1
    except ApiClientError as exc:
        failure(f"{messages.LOAD_FAILED} ({exc.message})")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Flask handlers for the election API.

Every handler is a thin relay: check the request shape, call the contract
gateway, wait for the receipt on writes, and answer with JSON. Gateway
failures become JSON errors carrying the underlying message: 400 for
unusable addresses, 500 for everything else.
"""

import logging
from functools import wraps
from typing import Any, Callable

from flask import current_app, jsonify, request

from contract_gateway import Candidate, TransactionResult
from errors import (
    ApiError,
    ErrorCode,
    forbidden,
    from_exception,
    invalid_field,
    missing_field,
)

logger = logging.getLogger(__name__)

GATEWAY_EXTENSION = "contract_gateway"


def get_gateway():
    return current_app.extensions[GATEWAY_EXTENSION]


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _tx_response(result: TransactionResult, message: str | None = None):
    payload: dict[str, Any] = {"success": True, "txHash": result.tx_hash, "receipt": result.receipt}
    if message:
        payload["message"] = message
    return jsonify(payload)


def relay(operation: str) -> Callable:
    """Turn exceptions raised by a handler into JSON error responses."""

    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ApiError as exc:
                if exc.status >= 500:
                    logger.error("%s error: %s", operation, exc.message)
                return jsonify(exc.to_dict()), exc.status
            except Exception as exc:
                api_error = from_exception(exc)
                if api_error.status < 500:
                    logger.info("%s rejected: %s", operation, api_error.message)
                    return jsonify(api_error.to_dict()), api_error.status
                logger.error(
                    "%s error: %s",
                    operation,
                    api_error.message,
                    exc_info=not current_app.config.get("PRODUCTION", False),
                )
                return jsonify(api_error.to_dict()), api_error.status

        return wrapper

    return decorator


def compute_winner(candidates: list[Candidate]) -> str | None:
    winner: Candidate | None = None
    for candidate in candidates:
        if winner is None or candidate.votes > winner.votes:
            winner = candidate
    return winner.name if winner else None


@relay("getCandidates")
def get_candidates():
    candidates = get_gateway().candidates()
    return jsonify([{"id": c.index, "name": c.name, "votes": str(c.votes)} for c in candidates])


@relay("addCandidate")
def add_candidate():
    name = _json_body().get("name")
    if not name:
        raise missing_field("Missing 'name' in body")
    return _tx_response(get_gateway().add_candidate(name))


@relay("authorizeVoter")
def authorize_voter():
    address = _json_body().get("address")
    if not address:
        raise missing_field("Missing 'address' in body")
    return _tx_response(get_gateway().authorize_voter(address))


@relay("endElection")
def end_election():
    return _tx_response(get_gateway().end_election())


@relay("restartElection")
def restart_election():
    password = _json_body().get("password")
    if not password:
        raise missing_field("Missing 'password' in body")
    try:
        result = get_gateway().restart_election(password)
    except Exception as exc:
        api_error = from_exception(exc)
        # reverts here are refusals (wrong password, election still active)
        if api_error.code not in (ErrorCode.CHAIN_ERROR, ErrorCode.TRANSACTION_FAILED):
            raise ApiError(api_error.message, 403, ErrorCode.RESTART_REJECTED) from exc
        raise
    return _tx_response(result, "Election restarted successfully")


@relay("setRestartPassword")
def set_restart_password():
    password = _json_body().get("password")
    if not password:
        raise missing_field("Missing 'password' in body")
    result = get_gateway().set_restart_password(password)
    return _tx_response(result, "Restart password updated successfully")


@relay("status")
def status():
    st = get_gateway().status()
    return jsonify(
        {
            "owner": st.owner,
            "electionName": st.election_name,
            "electionEnded": st.election_ended,
            "totalVotes": str(st.total_votes),
            "electionRound": str(st.election_round),
            "restartPasswordSet": st.restart_password_set,
        }
    )


@relay("getResults")
def get_results():
    candidates = get_gateway().candidates()
    return jsonify(
        {
            "totalVotes": sum(c.votes for c in candidates),
            "candidates": [{"index": c.index, "name": c.name, "votes": str(c.votes)} for c in candidates],
            "winner": compute_winner(candidates),
        }
    )


@relay("hasVoted")
def has_voted(address: str = ""):
    address = (address or "").strip()
    if not address:
        raise missing_field("Missing address param")
    voted = get_gateway().has_voted(address)
    return jsonify({"address": address, "voted": voted})


@relay("castVote")
def cast_vote():
    data = _json_body()
    candidate_index = data.get("candidateIndex")
    voter_address = data.get("voterAddress")
    if candidate_index is None or not voter_address:
        raise missing_field("Missing candidateIndex or voterAddress")
    if isinstance(candidate_index, bool) or not isinstance(candidate_index, (int, str)):
        raise invalid_field("candidateIndex must be a non-negative integer")
    try:
        candidate_index = int(candidate_index)
    except ValueError:
        raise invalid_field("candidateIndex must be a non-negative integer") from None
    if candidate_index < 0:
        raise invalid_field("candidateIndex must be a non-negative integer")

    gateway = get_gateway()
    voter = gateway.voter(voter_address)
    if not voter.authorized:
        raise forbidden("Voter not authorized", ErrorCode.VOTER_NOT_AUTHORIZED)
    if voter.voted:
        raise forbidden("Voter has already voted", ErrorCode.ALREADY_VOTED)
    if gateway.election_ended():
        raise forbidden("Election has ended", ErrorCode.ELECTION_ENDED)

    result = gateway.vote(candidate_index)
    return _tx_response(result, "Vote cast successfully")

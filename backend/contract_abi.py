import json
from typing import Any, Iterable

VIEW = "view"
NONPAYABLE = "nonpayable"


def _param(solidity_type: str, name: str = "") -> dict[str, str]:
    return {"internalType": solidity_type, "name": name, "type": solidity_type}


def _function(
    name: str,
    inputs: Iterable[dict[str, str]] = (),
    outputs: Iterable[dict[str, str]] = (),
    mutability: str = VIEW,
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": list(inputs),
        "outputs": list(outputs),
        "stateMutability": mutability,
    }


def build_voting_abi() -> list[dict[str, Any]]:
    return [
        # reads
        _function("owner", outputs=[_param("address")]),
        _function("electionName", outputs=[_param("string")]),
        _function("electionEnded", outputs=[_param("bool")]),
        _function("totalVotes", outputs=[_param("uint256")]),
        _function("getElectionRound", outputs=[_param("uint256")]),
        _function("isRestartPasswordSet", outputs=[_param("bool")]),
        _function("getNumCandidates", outputs=[_param("uint256")]),
        _function(
            "getCandidate",
            inputs=[_param("uint256", "index")],
            outputs=[_param("string", "name"), _param("uint256", "voteCount")],
        ),
        _function("hasVoted", inputs=[_param("address", "voter")], outputs=[_param("bool")]),
        _function(
            "voters",
            inputs=[_param("address")],
            outputs=[_param("bool", "authorized"), _param("bool", "voted")],
        ),
        # writes
        _function("addCandidate", inputs=[_param("string", "name")], mutability=NONPAYABLE),
        _function("authorizeVoter", inputs=[_param("address", "voter")], mutability=NONPAYABLE),
        _function("vote", inputs=[_param("uint256", "candidateIndex")], mutability=NONPAYABLE),
        _function("endElection", mutability=NONPAYABLE),
        _function("restartElection", inputs=[_param("string", "password")], mutability=NONPAYABLE),
        _function("setRestartPassword", inputs=[_param("string", "newPassword")], mutability=NONPAYABLE),
    ]


VOTING_ABI = build_voting_abi()


def load_abi(path: str | None = None) -> list[dict[str, Any]]:
    """Return the contract ABI, from a JSON file when a path is given.

    Accepts either a bare ABI list or a build artifact with an "abi" key.
    """
    if not path:
        return VOTING_ABI
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    abi = data if isinstance(data, list) else data.get("abi")
    if not isinstance(abi, list):
        raise ValueError(f"No ABI list found in {path}")
    return abi


if __name__ == "__main__":
    print(json.dumps(VOTING_ABI, indent=2))

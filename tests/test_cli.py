from unittest.mock import MagicMock

import pytest

import cli
from api_client import ApiClientError, VotexClient
from conftest import VOTER
from wallet import WalletError


@pytest.fixture
def api():
    client = MagicMock(spec=VotexClient)
    client.get_status.return_value = {
        "owner": "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1",
        "electionName": "Council",
        "electionEnded": False,
        "totalVotes": "3",
        "electionRound": "1",
        "restartPasswordSet": False,
    }
    client.get_candidates.return_value = [{"id": 0, "name": "Alice", "votes": "3"}]
    client.has_voted.return_value = {"address": VOTER, "voted": False}
    client.cast_vote.return_value = {"success": True, "txHash": "0x01", "message": "Vote cast successfully"}
    return client


def test_dashboard(api, capsys):
    assert cli.main(["dashboard"], client=api) == 0
    out = capsys.readouterr().out
    assert "Council" in out
    assert "[0] Alice: 3 votes" in out


def test_results(api, capsys):
    api.get_results.return_value = {
        "totalVotes": 5,
        "candidates": [{"index": 0, "name": "Alice", "votes": "3"}, {"index": 1, "name": "Bob", "votes": "2"}],
        "winner": "Alice",
    }
    assert cli.main(["results"], client=api) == 0
    assert "Leading: Alice" in capsys.readouterr().out


def test_vote_with_address(api, capsys):
    assert cli.main(["vote", "0", "--address", VOTER], client=api) == 0
    api.cast_vote.assert_called_once_with(0, VOTER)
    assert "Vote cast successfully" in capsys.readouterr().out


def test_vote_rejects_bad_address(api, capsys):
    assert cli.main(["vote", "0", "--address", "0x123"], client=api) == 1
    api.cast_vote.assert_not_called()
    assert "valid Ethereum address" in capsys.readouterr().err


def test_vote_refused_when_already_voted(api):
    api.has_voted.return_value = {"address": VOTER, "voted": True}
    assert cli.main(["vote", "0", "--address", VOTER], client=api) == 1
    api.cast_vote.assert_not_called()


def test_vote_refused_when_election_ended(api, capsys):
    api.get_status.return_value["electionEnded"] = True
    assert cli.main(["vote", "0", "--address", VOTER], client=api) == 1
    api.cast_vote.assert_not_called()
    assert "Election has ended" in capsys.readouterr().err


def test_vote_maps_error_code(api, capsys):
    api.cast_vote.side_effect = ApiClientError("Voter not authorized", status=403, code="VOTER_NOT_AUTHORIZED")
    assert cli.main(["vote", "0", "--address", VOTER], client=api) == 1
    assert "not authorized" in capsys.readouterr().err


def test_vote_connects_wallet(api, monkeypatch):
    monkeypatch.setattr(cli, "connect_wallet", lambda rpc_url: VOTER)
    assert cli.main(["vote", "0"], client=api) == 0
    api.cast_vote.assert_called_once_with(0, VOTER)


def test_connect_without_wallet(api, monkeypatch, capsys):
    def no_wallet(rpc_url):
        raise WalletError("Please connect your wallet to continue")

    monkeypatch.setattr(cli, "connect_wallet", no_wallet)
    assert cli.main(["connect"], client=api) == 1
    assert "connect your wallet" in capsys.readouterr().err


def test_connect_checks_eligibility(api, monkeypatch, capsys):
    monkeypatch.setattr(cli, "connect_wallet", lambda rpc_url: VOTER)
    api.has_voted.return_value = {"address": VOTER, "voted": True}
    assert cli.main(["connect"], client=api) == 0
    assert "already voted" in capsys.readouterr().out


def test_admin_add_candidate(api, capsys):
    api.add_candidate.return_value = {"success": True, "txHash": "0xfeed"}
    assert cli.main(["admin", "add-candidate", "Alice"], client=api) == 0
    out = capsys.readouterr().out
    assert "Candidate added successfully!" in out
    assert "0xfeed" in out


def test_admin_add_blank_candidate(api):
    assert cli.main(["admin", "add-candidate", "   "], client=api) == 1
    api.add_candidate.assert_not_called()


def test_admin_set_password_too_short(api, capsys):
    assert cli.main(["admin", "set-restart-password", "abc"], client=api) == 1
    api.set_restart_password.assert_not_called()
    assert "at least 6 characters" in capsys.readouterr().err


def test_admin_restart_rejected(api, capsys):
    api.restart_election.side_effect = ApiClientError("bad password", status=403, code="RESTART_REJECTED")
    assert cli.main(["admin", "restart", "wrong1"], client=api) == 1
    assert "check your password" in capsys.readouterr().err


def test_admin_authorize_validates_address(api):
    assert cli.main(["admin", "authorize", "bob"], client=api) == 1
    api.authorize_voter.assert_not_called()


def test_load_failure_is_reported(api, capsys):
    api.get_status.side_effect = ApiClientError("down", status=500, code="CHAIN_ERROR")
    assert cli.main(["status"], client=api) == 1
    assert "Failed to load election data" in capsys.readouterr().err


def test_no_command_prints_help(api):
    assert cli.main([], client=api) == 1


def test_non_json_response_exits_cleanly(capsys):
    session = MagicMock()
    session.headers = {}
    resp = MagicMock(status_code=200, reason="OK")
    resp.json.side_effect = ValueError("Expecting value")
    session.request.return_value = resp
    client = VotexClient(base_url="http://api.test/api", session=session, sleep=lambda _: None)

    assert cli.main(["status"], client=client) == 1
    assert session.request.call_count == 3
    assert "Invalid JSON response" in capsys.readouterr().err

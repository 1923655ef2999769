import os
import sys

import pytest
from web3 import Web3

# Ensure the backend modules are importable for tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
BACKEND = os.path.join(ROOT, "backend")
if BACKEND not in sys.path:
    sys.path.insert(0, BACKEND)

from contract_gateway import Candidate, ElectionStatus, TransactionResult, VoterRecord  # noqa: E402
from errors import InvalidAddress  # noqa: E402

OWNER = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"
VOTER = "0xFFcf8FDEE72ac11b5c542428B35EEF5769C409f0"
OTHER = "0x22d491Bde2303f2f43325b2108D26f1eAbA1e32b"


class FakeGateway:
    """In-memory stand-in for ContractGateway."""

    def __init__(self):
        self.names = []
        self.votes = []
        self.voters = {}
        self.ended = False
        self.round = 1
        self.password = None
        self.writes = []
        self.fail_with = None
        self.connected = True

    def _tx(self, op, *args):
        if self.fail_with is not None:
            raise self.fail_with
        self.writes.append((op, args))
        tx_hash = "0x" + format(len(self.writes), "064x")
        return TransactionResult(tx_hash=tx_hash, receipt={"status": 1, "transactionHash": tx_hash})

    def _read(self):
        if self.fail_with is not None:
            raise self.fail_with

    def is_connected(self):
        return self.connected

    def candidates(self):
        self._read()
        return [Candidate(i, n, v) for i, (n, v) in enumerate(zip(self.names, self.votes))]

    def _check(self, address):
        if not Web3.is_address(address):
            raise InvalidAddress(address)

    def voter(self, address):
        self._read()
        self._check(address)
        return self.voters.get(address.lower(), VoterRecord(False, False))

    def has_voted(self, address):
        return self.voter(address).voted

    def election_ended(self):
        self._read()
        return self.ended

    def status(self):
        self._read()
        return ElectionStatus(
            owner=OWNER,
            election_name="Student Council",
            election_ended=self.ended,
            total_votes=sum(self.votes),
            election_round=self.round,
            restart_password_set=self.password is not None,
        )

    def add_candidate(self, name):
        result = self._tx("addCandidate", name)
        self.names.append(name)
        self.votes.append(0)
        return result

    def authorize_voter(self, address):
        self._check(address)
        result = self._tx("authorizeVoter", address)
        self.voters[address.lower()] = VoterRecord(True, False)
        return result

    def end_election(self):
        result = self._tx("endElection")
        self.ended = True
        return result

    def restart_election(self, password):
        result = self._tx("restartElection", password)
        self.ended = False
        self.round += 1
        self.names, self.votes, self.voters = [], [], {}
        return result

    def set_restart_password(self, password):
        result = self._tx("setRestartPassword", password)
        self.password = password
        return result

    def vote(self, candidate_index):
        result = self._tx("vote", candidate_index)
        self.votes[candidate_index] += 1
        return result


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(gateway):
    from app import create_app

    application = create_app(gateway=gateway)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()

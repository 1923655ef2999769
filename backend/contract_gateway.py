import json
import logging
from typing import Any, NamedTuple

from web3 import Web3

from config import Settings
from contract_abi import load_abi
from errors import InvalidAddress, TransactionFailed

logger = logging.getLogger(__name__)


class Candidate(NamedTuple):
    index: int
    name: str
    votes: int


class VoterRecord(NamedTuple):
    authorized: bool
    voted: bool


class ElectionStatus(NamedTuple):
    owner: str
    election_name: str
    election_ended: bool
    total_votes: int
    election_round: int
    restart_password_set: bool


class TransactionResult(NamedTuple):
    tx_hash: str
    receipt: dict[str, Any]


class ContractGateway:
    """Read and signed-write access to the deployed voting contract."""

    def __init__(self, settings: Settings, web3: Web3 | None = None) -> None:
        self.settings = settings
        self.w3 = web3 if web3 is not None else Web3(Web3.HTTPProvider(settings.rpc_url))
        self.account = self.w3.eth.account.from_key(settings.private_key)
        self.contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(settings.contract_address),
            abi=load_abi(settings.abi_path),
        )
        self.timeout_seconds = settings.tx_timeout_seconds

    @staticmethod
    def _address(value: str) -> str:
        try:
            return Web3.to_checksum_address(str(value).strip())
        except (TypeError, ValueError) as exc:
            raise InvalidAddress(value) from exc

    @staticmethod
    def _receipt_to_dict(receipt: Any) -> dict[str, Any]:
        return json.loads(Web3.to_json(receipt))

    def is_connected(self) -> bool:
        return bool(self.w3.is_connected())

    # reads

    def owner(self) -> str:
        return self.contract.functions.owner().call()

    def election_name(self) -> str:
        return self.contract.functions.electionName().call()

    def election_ended(self) -> bool:
        return bool(self.contract.functions.electionEnded().call())

    def total_votes(self) -> int:
        return int(self.contract.functions.totalVotes().call())

    def election_round(self) -> int:
        return int(self.contract.functions.getElectionRound().call())

    def restart_password_set(self) -> bool:
        return bool(self.contract.functions.isRestartPasswordSet().call())

    def num_candidates(self) -> int:
        return int(self.contract.functions.getNumCandidates().call())

    def candidate(self, index: int) -> Candidate:
        name, votes = self.contract.functions.getCandidate(index).call()
        return Candidate(index=index, name=name, votes=int(votes))

    def candidates(self) -> list[Candidate]:
        return [self.candidate(i) for i in range(self.num_candidates())]

    def has_voted(self, address: str) -> bool:
        return bool(self.contract.functions.hasVoted(self._address(address)).call())

    def voter(self, address: str) -> VoterRecord:
        authorized, voted = self.contract.functions.voters(self._address(address)).call()[:2]
        return VoterRecord(authorized=bool(authorized), voted=bool(voted))

    def status(self) -> ElectionStatus:
        return ElectionStatus(
            owner=self.owner(),
            election_name=self.election_name(),
            election_ended=self.election_ended(),
            total_votes=self.total_votes(),
            election_round=self.election_round(),
            restart_password_set=self.restart_password_set(),
        )

    # writes

    def _transact(self, contract_fn: Any) -> TransactionResult:
        sender = self.account.address
        tx = contract_fn.build_transaction(
            {
                "from": sender,
                "nonce": self.w3.eth.get_transaction_count(sender, "pending"),
            }
        )
        signed = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.debug("Submitted %s as %s", contract_fn.fn_name, tx_hash_hex)

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.timeout_seconds)
        receipt_data = self._receipt_to_dict(receipt)
        if receipt_data.get("status") == 0:
            raise TransactionFailed(tx_hash_hex, receipt_data)
        logger.info(
            "%s confirmed in block %s (%s)",
            contract_fn.fn_name,
            receipt_data.get("blockNumber"),
            tx_hash_hex,
        )
        return TransactionResult(tx_hash=tx_hash_hex, receipt=receipt_data)

    def add_candidate(self, name: str) -> TransactionResult:
        return self._transact(self.contract.functions.addCandidate(name))

    def authorize_voter(self, address: str) -> TransactionResult:
        return self._transact(self.contract.functions.authorizeVoter(self._address(address)))

    def end_election(self) -> TransactionResult:
        return self._transact(self.contract.functions.endElection())

    def restart_election(self, password: str) -> TransactionResult:
        return self._transact(self.contract.functions.restartElection(password))

    def set_restart_password(self, password: str) -> TransactionResult:
        return self._transact(self.contract.functions.setRestartPassword(password))

    def vote(self, candidate_index: int) -> TransactionResult:
        return self._transact(self.contract.functions.vote(candidate_index))

from unittest.mock import MagicMock, PropertyMock

import pytest

from conftest import VOTER
from wallet import WalletError, connect_wallet


def test_first_account_is_checksummed():
    w3 = MagicMock()
    w3.eth.accounts = [VOTER.lower(), "0x22d491bde2303f2f43325b2108d26f1eaba1e32b"]
    assert connect_wallet("http://node", web3=w3) == VOTER


def test_no_accounts():
    w3 = MagicMock()
    w3.eth.accounts = []
    with pytest.raises(WalletError):
        connect_wallet("http://node", web3=w3)


def test_unreachable_node():
    w3 = MagicMock()
    type(w3.eth).accounts = PropertyMock(side_effect=ConnectionError("refused"))
    with pytest.raises(WalletError) as info:
        connect_wallet("http://node", web3=w3)
    assert "refused" in str(info.value)

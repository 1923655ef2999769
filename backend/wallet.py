from web3 import Web3


class WalletError(RuntimeError):
    pass


def connect_wallet(rpc_url: str, web3: Web3 | None = None) -> str:
    """Return the first account exposed by the node at ``rpc_url``."""
    w3 = web3 if web3 is not None else Web3(Web3.HTTPProvider(rpc_url))
    try:
        accounts = list(w3.eth.accounts)
    except Exception as exc:  # noqa: BLE001
        raise WalletError(f"Failed to connect wallet: {exc}") from exc
    if not accounts:
        raise WalletError("Please connect your wallet to continue")
    return Web3.to_checksum_address(accounts[0])

"""
In-memory wallet keystore.

Wallets are ``eth_account`` local accounts keyed by lower-cased address and
live only for the lifetime of the process. One wallet is "current" and signs
every state-changing tool call.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys import keys

from rootstock_mcp.config import RootstockConfig, default_config
from rootstock_mcp.models import WalletInfo
from rootstock_mcp.rootstock_api.abi import is_valid_address as _is_strict_address

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()

DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"


class WalletError(Exception):
    """Base exception for keystore errors."""


class WalletNotFoundError(WalletError):
    """Raised when an address is not present in the keystore."""


class NoCurrentWalletError(WalletError):
    """Raised when a signing operation needs a current wallet and none is set."""


def _normalize_private_key(private_key: str) -> str:
    key = private_key.strip()
    return key if key.lower().startswith("0x") else f"0x{key}"


def _public_key(account: LocalAccount) -> str:
    public = keys.PrivateKey(bytes(account.key)).public_key
    return "0x04" + public.to_bytes().hex()


def _private_key_hex(account: LocalAccount) -> str:
    return "0x" + bytes(account.key).hex()


def mask_private_key(private_key: str) -> str:
    if len(private_key) < 10:
        return private_key
    return f"{private_key[:6]}...{private_key[-4:]}"


class WalletManager:
    """Address -> signing key map with a selected current wallet."""

    def __init__(self) -> None:
        self._wallets: Dict[str, LocalAccount] = {}
        self._names: Dict[str, str] = {}
        self._current: Optional[str] = None

    @classmethod
    def from_config(cls, config: RootstockConfig | None = None) -> "WalletManager":
        config = config or default_config
        manager = cls()
        manager.load_from_env(config.private_keys, config.addresses, config.current_address)
        return manager

    def load_from_env(
        self,
        private_keys: Iterable[str],
        addresses: Optional[List[str]] = None,
        current_address: Optional[str] = None,
    ) -> int:
        """
        Load bootstrap wallets.

        Invalid keys are skipped with a warning so one bad entry never blocks
        startup. Returns the number of wallets loaded.
        """
        addresses = addresses or []
        wanted = current_address.strip().lower() if current_address else None
        loaded = 0
        for index, raw_key in enumerate(private_keys):
            if not raw_key or not raw_key.strip():
                continue
            try:
                account = Account.from_key(_normalize_private_key(raw_key))
            except Exception as exc:
                logger.warning("Failed to load wallet %d from environment: %s", index, type(exc).__name__)
                continue
            key = account.address.lower()
            declared = addresses[index].strip() if index < len(addresses) else ""
            if declared and declared.lower() != key:
                logger.warning(
                    "Configured address %s does not match key %d; using derived address %s",
                    declared,
                    index,
                    account.address,
                )
            self._wallets[key] = account
            loaded += 1
            if self._current is None or key == wanted:
                self._current = key
        if loaded:
            logger.info("Loaded %d wallet(s) from environment", loaded)
        return loaded

    def _store(self, account: LocalAccount, name: Optional[str]) -> None:
        key = account.address.lower()
        self._wallets[key] = account
        if name:
            self._names[key] = name
        if self._current is None:
            self._current = key

    def create_wallet(self, name: Optional[str] = None) -> WalletInfo:
        """Generate a new 12-word mnemonic wallet and store it."""
        account, mnemonic = Account.create_with_mnemonic(
            num_words=12, account_path=DEFAULT_DERIVATION_PATH
        )
        self._store(account, name)
        logger.info("Created wallet %s", account.address)
        return WalletInfo(
            address=account.address,
            private_key=_private_key_hex(account),
            mnemonic=mnemonic,
            public_key=_public_key(account),
            name=name,
        )

    def import_wallet(
        self,
        private_key: Optional[str] = None,
        mnemonic: Optional[str] = None,
        name: Optional[str] = None,
    ) -> WalletInfo:
        """Import a wallet from a private key (preferred) or a BIP39 mnemonic."""
        if private_key:
            try:
                account = Account.from_key(_normalize_private_key(private_key))
            except Exception as exc:
                raise WalletError("Invalid private key") from exc
        elif mnemonic:
            phrase = " ".join(mnemonic.split())
            if not self.is_valid_mnemonic(phrase):
                raise WalletError("Invalid mnemonic phrase")
            account = Account.from_mnemonic(phrase, account_path=DEFAULT_DERIVATION_PATH)
            mnemonic = phrase
        else:
            raise WalletError("Either private key or mnemonic must be provided")

        self._store(account, name)
        logger.info("Imported wallet %s", account.address)
        return WalletInfo(
            address=account.address,
            private_key=_private_key_hex(account),
            mnemonic=mnemonic,
            public_key=_public_key(account),
            name=name,
        )

    def get_wallet(self, address: str) -> LocalAccount:
        account = self._wallets.get((address or "").lower())
        if account is None:
            raise WalletNotFoundError(f"Wallet not found for address: {address}")
        return account

    def get_current_wallet(self) -> LocalAccount:
        if self._current is None:
            raise NoCurrentWalletError("No current wallet set")
        return self.get_wallet(self._current)

    def set_current_wallet(self, address: str) -> None:
        key = (address or "").lower()
        if key not in self._wallets:
            raise WalletNotFoundError(f"Wallet not found for address: {address}")
        self._current = key

    def get_current_address(self) -> str:
        if self._current is None:
            raise NoCurrentWalletError("No current wallet set")
        return self._wallets[self._current].address

    def has_wallet(self, address: str) -> bool:
        return (address or "").lower() in self._wallets

    def remove_wallet(self, address: str) -> None:
        key = (address or "").lower()
        if key not in self._wallets:
            raise WalletNotFoundError(f"Wallet not found for address: {address}")
        del self._wallets[key]
        self._names.pop(key, None)
        if self._current == key:
            self._current = next(iter(self._wallets), None)

    def wallet_count(self) -> int:
        return len(self._wallets)

    def list_wallets(self) -> List[WalletInfo]:
        """List wallets without private keys."""
        return [
            WalletInfo(
                address=account.address,
                public_key=_public_key(account),
                name=self._names.get(key),
            )
            for key, account in self._wallets.items()
        ]

    def get_wallet_info(self, address: str) -> WalletInfo:
        """Return wallet details with the private key masked."""
        account = self.get_wallet(address)
        return WalletInfo(
            address=account.address,
            private_key=mask_private_key(_private_key_hex(account)),
            public_key=_public_key(account),
            name=self._names.get(account.address.lower()),
        )

    def clear(self) -> None:
        self._wallets.clear()
        self._names.clear()
        self._current = None

    @staticmethod
    def is_valid_address(address: Optional[str]) -> bool:
        if not address or not isinstance(address, str):
            return False
        return _is_strict_address(address.strip())

    @staticmethod
    def is_valid_private_key(private_key: Optional[str]) -> bool:
        if not private_key or not isinstance(private_key, str):
            return False
        try:
            Account.from_key(_normalize_private_key(private_key))
            return True
        except Exception:
            return False

    @staticmethod
    def is_valid_mnemonic(mnemonic: Optional[str]) -> bool:
        if not mnemonic or not isinstance(mnemonic, str):
            return False
        try:
            Account.from_mnemonic(" ".join(mnemonic.split()))
            return True
        except Exception:
            return False


default_wallet_manager = WalletManager.from_config()

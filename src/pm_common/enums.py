"""Global enums — wire values must match DB CHECK constraints exactly."""

from enum import Enum, IntEnum


class Outcome(str, Enum):
    """Market winner. UNRESOLVED serializes to the empty string."""

    UNRESOLVED = ""
    YES = "yes"
    NO = "no"

    @classmethod
    def from_is_yes(cls, is_yes: bool) -> "Outcome":
        return cls.YES if is_yes else cls.NO


class BettingErrorCode(IntEnum):
    """Stable program error ordering, numbered from 6000."""

    UNINITIALIZED = 6000
    ALREADY_INITIALIZED = 6001
    UNAUTHORIZED = 6002
    BET_ENDED = 6003
    INVALID_BET = 6004
    BET_COMPLETE = 6005
    BET_NOT_ENDED = 6006
    ALREADY_CLAIMED = 6007
    BET_NOT_COMPLETE = 6008
    WRONG_BET = 6009
    TITLE_TOO_LONG = 6010
    DESCRIPTION_TOO_LONG = 6011
    TITLE_EMPTY = 6012
    DESCRIPTION_EMPTY = 6013
    MATH_OVERFLOW = 6014
    INVALID_FEE_CONFIGURATION = 6015


class LedgerEntryType(str, Enum):
    # Wallet funding (dev airdrop)
    AIRDROP = "AIRDROP"
    # Vault creation at init-registry (user + vault paired)
    VAULT_RENT = "VAULT_RENT"
    VAULT_RENT_IN = "VAULT_RENT_IN"
    # Deposit into a market (user + vault paired)
    BET_DEPOSIT = "BET_DEPOSIT"
    BET_DEPOSIT_IN = "BET_DEPOSIT_IN"
    # Outflows from the vault (vault + recipient paired)
    PLATFORM_FEE_OUT = "PLATFORM_FEE_OUT"
    PLATFORM_FEE = "PLATFORM_FEE"
    WINNER_PAYOUT_OUT = "WINNER_PAYOUT_OUT"
    WINNER_PAYOUT = "WINNER_PAYOUT"
    CREATOR_FEE_OUT = "CREATOR_FEE_OUT"
    CREATOR_FEE = "CREATOR_FEE"


class EventType(str, Enum):
    CREATE = "CreateEvent"
    DEPOSIT = "DepositEvent"
    COMPLETE = "CompleteEvent"

"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Account / vault transfers
  3xxx: Lookup (market, entry)
  6xxx: Betting program (stable ordering, see BettingErrorCode)
  9xxx: System
"""

from src.pm_common.enums import BettingErrorCode


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, address: str, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance for {address}: required {required} lamports, "
            f"available {available} lamports",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(2002, f"Account not found: {address}", 404)


class AirdropDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(2003, "Airdrop is disabled", 403)


# --- 3xxx: Lookup ---

class MarketNotFoundError(AppError):
    def __init__(self, bet_id: int) -> None:
        super().__init__(3001, f"Market not found: {bet_id}", 404)


class EntryNotFoundError(AppError):
    def __init__(self, bet_id: int, user: str) -> None:
        super().__init__(3003, f"Entry not found for user {user} in market {bet_id}", 404)


# --- 6xxx: Betting program ---

class BettingError(AppError):
    """Program error carrying one of the stable BettingErrorCode values."""

    error_code: BettingErrorCode

    def __init__(self, message: str, http_status: int = 422) -> None:
        super().__init__(int(self.error_code), message, http_status)


class UninitializedError(BettingError):
    error_code = BettingErrorCode.UNINITIALIZED

    def __init__(self) -> None:
        super().__init__("Is not initialized", 409)


class AlreadyInitializedError(BettingError):
    error_code = BettingErrorCode.ALREADY_INITIALIZED

    def __init__(self) -> None:
        super().__init__("Is already initialized", 409)


class UnauthorizedError(BettingError):
    error_code = BettingErrorCode.UNAUTHORIZED

    def __init__(self) -> None:
        super().__init__("Is unauthorized", 403)


class BetEndedError(BettingError):
    error_code = BettingErrorCode.BET_ENDED

    def __init__(self) -> None:
        super().__init__("Bet has ended")


class InvalidBetError(BettingError):
    error_code = BettingErrorCode.INVALID_BET

    def __init__(self) -> None:
        super().__init__("Invalid bet")


class BetCompleteError(BettingError):
    error_code = BettingErrorCode.BET_COMPLETE

    def __init__(self) -> None:
        super().__init__("Bet is complete")


class BetNotEndedError(BettingError):
    error_code = BettingErrorCode.BET_NOT_ENDED

    def __init__(self) -> None:
        super().__init__("Bet has not ended")


class AlreadyClaimedError(BettingError):
    error_code = BettingErrorCode.ALREADY_CLAIMED

    def __init__(self) -> None:
        super().__init__("Already claimed", 409)


class BetNotCompleteError(BettingError):
    error_code = BettingErrorCode.BET_NOT_COMPLETE

    def __init__(self) -> None:
        super().__init__("Bet has not completed")


class WrongBetError(BettingError):
    error_code = BettingErrorCode.WRONG_BET

    def __init__(self) -> None:
        super().__init__("Wrong bet")


class TitleTooLongError(BettingError):
    error_code = BettingErrorCode.TITLE_TOO_LONG

    def __init__(self) -> None:
        super().__init__("Title is too long (max 100 bytes)")


class DescriptionTooLongError(BettingError):
    error_code = BettingErrorCode.DESCRIPTION_TOO_LONG

    def __init__(self) -> None:
        super().__init__("Description is too long (max 500 bytes)")


class TitleEmptyError(BettingError):
    error_code = BettingErrorCode.TITLE_EMPTY

    def __init__(self) -> None:
        super().__init__("Title cannot be empty")


class DescriptionEmptyError(BettingError):
    error_code = BettingErrorCode.DESCRIPTION_EMPTY

    def __init__(self) -> None:
        super().__init__("Description cannot be empty")


class MathOverflowError(BettingError):
    error_code = BettingErrorCode.MATH_OVERFLOW

    def __init__(self) -> None:
        super().__init__("Math overflow")


class InvalidFeeConfigurationError(BettingError):
    error_code = BettingErrorCode.INVALID_FEE_CONFIGURATION

    def __init__(self, creator_fee_bps: int, platform_fee_bps: int) -> None:
        super().__init__(
            f"Fee configuration invalid: creator_fee_bps({creator_fee_bps}) + "
            f"platform_fee_bps({platform_fee_bps}) must be below 10000"
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)

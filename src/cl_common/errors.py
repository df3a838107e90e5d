"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Player
  2xxx: Account / Agent / Broker
  3xxx: Entry
  4xxx: Settings
  9xxx: System
"""


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


# --- 1xxx: Player ---

class PlayerNotFoundError(AppError):
    def __init__(self, player_ref: str) -> None:
        super().__init__(1001, f"Player not found: {player_ref}", 404)


class PlayerEmailExistsError(AppError):
    def __init__(self, email: str) -> None:
        super().__init__(1002, f"Player email already exists: {email}", 409)


class PlayerAlreadyActiveError(AppError):
    def __init__(self, player_id: str) -> None:
        super().__init__(1003, f"Player is already active: {player_id}", 409)


class PlayerNotActiveError(AppError):
    def __init__(self, player_id: str) -> None:
        super().__init__(1004, f"Player is still pending activation: {player_id}", 422)


# --- 2xxx: Account / Agent / Broker ---

class AccountNotFoundError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(2001, f"Account not found: {account_id}", 404)


class InvalidAccountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Invalid account: {detail}", 422)


class AgentNotFoundError(AppError):
    def __init__(self, agent_id: str) -> None:
        super().__init__(2003, f"Agent not found: {agent_id}", 404)


class AgentInUseError(AppError):
    def __init__(self, agent_id: str, account_count: int) -> None:
        super().__init__(
            2004,
            f"Agent {agent_id} still holds {account_count} account(s)",
            409,
        )


class BrokerNotFoundError(AppError):
    def __init__(self, broker_id: str) -> None:
        super().__init__(2005, f"Broker not found: {broker_id}", 404)


class BrokerInUseError(AppError):
    def __init__(self, broker_id: str, account_count: int) -> None:
        super().__init__(
            2006,
            f"Broker {broker_id} is still linked to {account_count} account(s)",
            409,
        )


# --- 3xxx: Entry ---

class EntryNotFoundError(AppError):
    def __init__(self, entry_id: str) -> None:
        super().__init__(3001, f"Entry not found: {entry_id}", 404)


class DuplicateEntryError(AppError):
    def __init__(self, account_id: str, entry_date: str) -> None:
        super().__init__(
            3002,
            f"Entry already exists for account {account_id} on {entry_date}",
            409,
        )


class InvalidEntryError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3003, f"Invalid entry: {detail}", 422)


# --- 4xxx: Settings ---

class InvalidTaxRateError(AppError):
    def __init__(self, bps: int) -> None:
        super().__init__(4001, f"Tax rate out of range: {bps} bps", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)

"""AccountRepository — custody balances and the append-only ledger.

Debits are a single conditional UPDATE ... RETURNING; zero rows back means
insufficient funds. Credits upsert, so a round vault or a treasury account
comes into existence on its first credit.

Transaction ownership: the calling application service commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_account.domain.models import Account, LedgerEntry, Transfer
from src.lr_common.amounts import ensure_u64
from src.lr_common.enums import LedgerEntryType
from src.lr_common.errors import AccountNotFoundError, InsufficientBalanceError, InternalError

_ACCOUNT_COLUMNS = "id, user_id, available_balance, version, created_at, updated_at"

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE user_id = :user_id
""")

_CREDIT_EXISTING_SQL = text(f"""
    UPDATE accounts
    SET available_balance = available_balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING {_ACCOUNT_COLUMNS}
""")

_CREDIT_UPSERT_SQL = text(f"""
    INSERT INTO accounts (user_id, available_balance, version)
    VALUES (:user_id, :amount, 1)
    ON CONFLICT (user_id) DO UPDATE
        SET available_balance = accounts.available_balance + EXCLUDED.available_balance,
            version = accounts.version + 1,
            updated_at = NOW()
    RETURNING {_ACCOUNT_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE accounts
    SET available_balance = available_balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND available_balance >= :amount
    RETURNING {_ACCOUNT_COLUMNS}
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_id, entry_type, amount, balance_after,
           reference_type, reference_id, description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < :cursor_id)
      AND (CAST(:entry_type AS VARCHAR) IS NULL OR entry_type = :entry_type)
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_account(row: object) -> Account:
    return Account(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        available_balance=int(row.available_balance),  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=int(row.amount),  # type: ignore[attr-defined]
        balance_after=int(row.balance_after),  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    async def get_account(self, db: AsyncSession, user_id: str) -> Account | None:
        row = (await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})).fetchone()
        return _row_to_account(row) if row else None

    async def _debit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        row = (
            await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        ).fetchone()
        if row is None:
            current = await self.get_account(db, user_id)
            raise InsufficientBalanceError(
                amount, current.available_balance if current else 0
            )
        return _row_to_account(row)

    async def _credit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        row = (
            await db.execute(_CREDIT_UPSERT_SQL, {"user_id": user_id, "amount": amount})
        ).fetchone()
        if row is None:
            raise InternalError(f"Credit to {user_id} returned no rows")
        account = _row_to_account(row)
        ensure_u64(account.available_balance, f"balance of {user_id}")
        return account

    async def _append_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        entry_type: LedgerEntryType,
        amount: int,
        balance_after: int,
        reference_type: str | None,
        reference_id: str | None,
        description: str | None,
    ) -> LedgerEntry:
        row = (
            await db.execute(
                _INSERT_LEDGER_SQL,
                {
                    "user_id": user_id,
                    "entry_type": entry_type.value,
                    "amount": amount,
                    "balance_after": balance_after,
                    "reference_type": reference_type,
                    "reference_id": reference_id,
                    "description": description,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows")
        return _row_to_ledger(row)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]:
        row = (
            await db.execute(_CREDIT_EXISTING_SQL, {"user_id": user_id, "amount": amount})
        ).fetchone()
        if row is None:
            raise AccountNotFoundError(user_id)
        account = _row_to_account(row)
        ensure_u64(account.available_balance, "balance")
        entry = await self._append_ledger(
            db, user_id, LedgerEntryType.DEPOSIT, amount,
            account.available_balance, "DEPOSIT", None, "Simulated deposit",
        )
        return account, entry

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]:
        account = await self._debit(db, user_id, amount)
        entry = await self._append_ledger(
            db, user_id, LedgerEntryType.WITHDRAW, -amount,
            account.available_balance, "WITHDRAW", None, "Simulated withdrawal",
        )
        return account, entry

    async def transfer(self, db: AsyncSession, transfer: Transfer) -> None:
        """Move ``transfer.amount`` between two accounts, one ledger entry per side."""
        if transfer.amount <= 0:
            return
        source = await self._debit(db, transfer.from_id, transfer.amount)
        await self._append_ledger(
            db, transfer.from_id, transfer.debit_type, -transfer.amount,
            source.available_balance, transfer.reference_type,
            transfer.reference_id, f"to {transfer.to_id}",
        )
        target = await self._credit(db, transfer.to_id, transfer.amount)
        await self._append_ledger(
            db, transfer.to_id, transfer.credit_type, transfer.amount,
            target.available_balance, transfer.reference_type,
            transfer.reference_id, f"from {transfer.from_id}",
        )

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        rows = (
            await db.execute(
                _LIST_LEDGER_SQL,
                {
                    "user_id": user_id,
                    "cursor_id": cursor_id,
                    "entry_type": entry_type,
                    "limit": limit,
                },
            )
        ).fetchall()
        return [_row_to_ledger(row) for row in rows]

"""In-process data store for users, transactions, KYC requests and orders.

Responsibilities
----------------
- Hold the volatile maps the API works against (a restart loses everything).
- Expose read helpers returning plain dict copies, mirroring row access.
- Make every balance mutation an atomic operation under a single lock, so
  concurrent requests for the same user cannot lose updates.
- Track payment orders through created -> processing -> paid so a repeated
  payment callback never records a second transaction.
"""

from __future__ import annotations

import itertools
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from enkrypt.models.constants import KYC_STATUSES, TRANSACTION_STATUSES, TRANSACTION_TYPES
from enkrypt.services.money import round_asset


class StoreError(Exception):
    pass


class UserNotFound(StoreError):
    pass


class OrderNotFound(StoreError):
    pass


class InsufficientBalance(StoreError):
    def __init__(self, balance: float, requested: float):
        super().__init__(f"balance {balance} is below requested {requested}")
        self.balance = balance
        self.requested = requested


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Dict[str, Dict[str, Any]] = {}
        self._transactions: Dict[str, Dict[str, Any]] = {}
        self._kyc_requests: Dict[str, Dict[str, Any]] = {}
        self._orders: Dict[str, Dict[str, Any]] = {}
        # Insertion sequence breaks createdAt ties when sorting by recency
        self._seq = itertools.count()

    # ------------------------------------------------------------------
    # Users
    def create_user(
        self, uid: str, email: str, display_name: str, wallet_address: str
    ) -> Tuple[Dict[str, Any], bool]:
        """Insert a profile; returns (row, created). Existing uids are left intact."""
        with self._lock:
            existing = self._users.get(uid)
            if existing is not None:
                return dict(existing), False
            now = utcnow()
            row = {
                "uid": uid,
                "email": email,
                "display_name": display_name,
                "wallet_address": wallet_address,
                "balance": 0.0,
                "kyc_status": "pending",
                "created_at": now,
                "updated_at": now,
            }
            self._users[uid] = row
            return dict(row), True

    def get_user(self, uid: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._users.get(uid)
            return dict(row) if row else None

    def require_user(self, uid: str) -> Dict[str, Any]:
        row = self.get_user(uid)
        if row is None:
            raise UserNotFound(uid)
        return row

    def set_kyc_status(self, uid: str, status: str) -> Optional[Dict[str, Any]]:
        if status not in KYC_STATUSES:
            raise ValueError(f"unknown kyc status '{status}'")
        with self._lock:
            row = self._users.get(uid)
            if row is None:
                return None
            row["kyc_status"] = status
            row["updated_at"] = utcnow()
            return dict(row)

    def credit(self, uid: str, amount: float) -> float:
        if amount <= 0:
            raise ValueError("credit amount must be positive")
        with self._lock:
            row = self._users.get(uid)
            if row is None:
                raise UserNotFound(uid)
            row["balance"] = round_asset(row["balance"] + amount)
            row["updated_at"] = utcnow()
            return row["balance"]

    def debit(self, uid: str, amount: float) -> float:
        """Check-and-debit in one step; raises InsufficientBalance without mutating."""
        if amount <= 0:
            raise ValueError("debit amount must be positive")
        with self._lock:
            row = self._users.get(uid)
            if row is None:
                raise UserNotFound(uid)
            if row["balance"] < amount:
                raise InsufficientBalance(row["balance"], amount)
            row["balance"] = round_asset(row["balance"] - amount)
            row["updated_at"] = utcnow()
            return row["balance"]

    # ------------------------------------------------------------------
    # Transactions
    def insert_transaction(self, uid: str, type: str, usdt_amount: float, status: str, **extra: Any) -> Dict[str, Any]:
        if type not in TRANSACTION_TYPES:
            raise ValueError(f"unknown transaction type '{type}'")
        if status not in TRANSACTION_STATUSES:
            raise ValueError(f"unknown transaction status '{status}'")
        with self._lock:
            row = {
                "id": str(uuid.uuid4()),
                "uid": uid,
                "type": type,
                "usdt_amount": usdt_amount,
                "status": status,
                "inr_amount": extra.get("inr_amount"),
                "rate": extra.get("rate"),
                "tx_hash": extra.get("tx_hash"),
                "from_address": extra.get("from_address"),
                "to_address": extra.get("to_address"),
                "razorpay_order_id": extra.get("razorpay_order_id"),
                "razorpay_payment_id": extra.get("razorpay_payment_id"),
                "created_at": utcnow(),
                "_seq": next(self._seq),
            }
            self._transactions[row["id"]] = row
            return dict(row)

    def get_transaction(self, transaction_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._transactions.get(transaction_id)
            return dict(row) if row else None

    def list_transactions(self, uid: str) -> List[Dict[str, Any]]:
        """Transactions of one user, newest first."""
        with self._lock:
            rows = [dict(r) for r in self._transactions.values() if r["uid"] == uid]
        rows.sort(key=lambda r: (r["created_at"], r["_seq"]), reverse=True)
        return rows

    # ------------------------------------------------------------------
    # KYC requests
    def insert_kyc_request(
        self, uid: str, documents: Dict[str, str], status: str, verification_id: str
    ) -> Dict[str, Any]:
        with self._lock:
            now = utcnow()
            row = {
                "id": str(uuid.uuid4()),
                "uid": uid,
                "documents": dict(documents),
                "status": status,
                "verification_id": verification_id,
                "submitted_at": now,
                "updated_at": now,
                "_seq": next(self._seq),
            }
            self._kyc_requests[row["id"]] = row
            return dict(row)

    def list_kyc_requests(self, uid: str) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [dict(r) for r in self._kyc_requests.values() if r["uid"] == uid]
        rows.sort(key=lambda r: (r["submitted_at"], r["_seq"]), reverse=True)
        return rows

    def latest_kyc_request(self, uid: str) -> Optional[Dict[str, Any]]:
        rows = self.list_kyc_requests(uid)
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Payment orders
    def create_order(self, order_id: str, uid: str, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        with self._lock:
            row = {
                "id": order_id,
                "uid": uid,
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
                "status": "created",
                "transaction_id": None,
                "created_at": utcnow(),
            }
            self._orders[order_id] = row
            return dict(row)

    def get_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._orders.get(order_id)
            return dict(row) if row else None

    def claim_order(self, order_id: str) -> Tuple[Dict[str, Any], bool]:
        """Move a created order to processing; returns (row, claimed).

        claimed is False when another callback already took the order, in which
        case the row tells whether it is still processing or already paid.
        """
        with self._lock:
            row = self._orders.get(order_id)
            if row is None:
                raise OrderNotFound(order_id)
            if row["status"] != "created":
                return dict(row), False
            row["status"] = "processing"
            return dict(row), True

    def release_order(self, order_id: str) -> None:
        """Return a processing order to created after an aborted settlement."""
        with self._lock:
            row = self._orders.get(order_id)
            if row is not None and row["status"] == "processing":
                row["status"] = "created"

    def record_buy(self, order_id: str, credit_balance: bool, **transaction: Any) -> Dict[str, Any]:
        """Insert the buy transaction, credit the buyer and mark the order paid atomically."""
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            if credit_balance:
                # validate the credit before anything is written
                if transaction.get("uid") not in self._users:
                    raise UserNotFound(transaction.get("uid"))
                if not transaction.get("usdt_amount", 0) > 0:
                    raise ValueError("credit amount must be positive")
            tx = self.insert_transaction(type="buy", razorpay_order_id=order_id, **transaction)
            if credit_balance:
                self.credit(tx["uid"], tx["usdt_amount"])
            order["status"] = "paid"
            order["transaction_id"] = tx["id"]
            return tx

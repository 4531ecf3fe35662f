"""Persistence layer for savings goals, debts and budget entries.

This module keeps a user's goals and dated spending entries in an external
database so the web API can recompute payoff figures and monthly budgets on
every request. It defaults to SQLite for local development, but accepts any
SQLAlchemy-compatible URL (e.g. PostgreSQL/MySQL).
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import Column, Date, DateTime, Numeric, String, create_engine, select
from sqlalchemy.orm import declarative_base, sessionmaker

from finance_calc.data_models import KIND_DEBT, BudgetEntry, Debt, SavingsGoal
from finance_calc.periods import month_range

Base = declarative_base()

Goal = Union[SavingsGoal, Debt]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class GoalModel(Base):
    __tablename__ = "goals"

    id = Column(String(64), primary_key=True)
    user_token = Column(String(64), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    kind = Column(String(16), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)  # target for goals, balance for debts
    saved = Column(Numeric(14, 2), nullable=False, default=0)
    interest_rate = Column(Numeric(7, 3), nullable=True)
    deadline = Column(Date, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class BudgetEntryModel(Base):
    __tablename__ = "budget_entries"

    id = Column(String(64), primary_key=True)
    user_token = Column(String(64), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    kind = Column(String(16), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    spent_on = Column(Date, index=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class GoalStore:
    """Database-backed store of goals, debts and budget entries."""

    def __init__(self, url: str, *, max_per_user: int = 20) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)
        self._max_per_user = max_per_user

    # ── goals ────────────────────────────────────────────────────────

    def list_goals(self, user_token: str) -> List[Dict[str, Any]]:
        if not user_token:
            return []
        with self._session_factory() as session:
            rows = session.execute(
                select(GoalModel)
                .where(GoalModel.user_token == user_token)
                .order_by(GoalModel.created_at.asc())
            ).scalars()
            return [self._goal_to_dict(row) for row in rows]

    def add_goal(self, user_token: str, goal_id: str, goal: Goal) -> Optional[Dict[str, Any]]:
        """Store a goal or debt and return it as read back from the database.

        Amounts come back rounded to the column scale, so the result matches
        what ``list_goals`` reports later.
        """
        if not user_token:
            return None
        if goal.kind == KIND_DEBT:
            payload = GoalModel(
                id=goal_id,
                user_token=user_token,
                name=goal.name,
                kind=goal.kind,
                amount=goal.balance,
                saved=Decimal("0"),
                interest_rate=goal.annual_percentage_rate,
                deadline=goal.deadline,
            )
        else:
            payload = GoalModel(
                id=goal_id,
                user_token=user_token,
                name=goal.name,
                kind=goal.kind,
                amount=goal.target_amount,
                saved=goal.amount_saved,
                interest_rate=None,
                deadline=goal.deadline,
            )
        with self._session_factory() as session:
            session.add(payload)
            session.commit()
            session.refresh(payload)
            stored = self._goal_to_dict(payload)
        self._trim_user(user_token)
        return stored

    def update_saved(self, user_token: str, goal_id: str, saved: Decimal) -> Optional[Dict[str, Any]]:
        """Set the saved amount of a savings goal, clamped to 0..target.

        Returns the updated goal, or ``None`` when there is no such savings
        goal for this user.
        """
        with self._session_factory() as session:
            row = session.get(GoalModel, goal_id)
            if row is None or row.user_token != user_token or row.kind == KIND_DEBT:
                return None
            row.saved = min(Decimal(row.amount), max(Decimal("0"), saved))
            session.commit()
            session.refresh(row)
            return self._goal_to_dict(row)

    def remove_goal(self, user_token: str, goal_id: str) -> bool:
        if not user_token:
            return False
        with self._session_factory() as session:
            row = session.get(GoalModel, goal_id)
            if row and row.user_token == user_token:
                session.delete(row)
                session.commit()
                return True
        return False

    def _trim_user(self, user_token: str) -> None:
        if not self._max_per_user or self._max_per_user < 0:
            return
        with self._session_factory() as session:
            rows = session.execute(
                select(GoalModel)
                .where(GoalModel.user_token == user_token)
                .order_by(GoalModel.created_at.desc())
            ).scalars().all()
            if len(rows) <= self._max_per_user:
                return
            for row in rows[self._max_per_user :]:
                session.delete(row)
            session.commit()

    # ── budget entries ───────────────────────────────────────────────

    def add_entry(self, user_token: str, entry_id: str, entry: BudgetEntry) -> None:
        if not user_token:
            return
        payload = BudgetEntryModel(
            id=entry_id,
            user_token=user_token,
            name=entry.name,
            kind=entry.kind,
            amount=entry.amount,
            spent_on=entry.spent_on,
        )
        with self._session_factory() as session:
            session.add(payload)
            session.commit()

    def entries_for_month(self, user_token: str, today: date) -> List[BudgetEntry]:
        """Entries dated within the calendar month containing ``today``."""
        if not user_token:
            return []
        first_day, last_day = month_range(today)
        with self._session_factory() as session:
            rows = session.execute(
                select(BudgetEntryModel)
                .where(BudgetEntryModel.user_token == user_token)
                .where(BudgetEntryModel.spent_on >= first_day)
                .where(BudgetEntryModel.spent_on <= last_day)
                .order_by(BudgetEntryModel.spent_on.asc(), BudgetEntryModel.created_at.asc())
            ).scalars()
            return [
                BudgetEntry(name=row.name, amount=Decimal(row.amount), kind=row.kind, spent_on=row.spent_on)
                for row in rows
            ]

    @staticmethod
    def _goal_to_dict(row: GoalModel) -> Dict[str, Any]:
        if row.kind == KIND_DEBT:
            goal: Goal = Debt(
                balance=Decimal(row.amount),
                annual_percentage_rate=Decimal(row.interest_rate or 0),
                deadline=row.deadline,
                name=row.name,
            )
        else:
            goal = SavingsGoal(
                target_amount=Decimal(row.amount),
                amount_saved=Decimal(row.saved),
                deadline=row.deadline,
                name=row.name,
            )
        return {
            "id": row.id,
            "goal": goal,
            "created_at": row.created_at.isoformat(),
        }


def create_store_from_env(url: Optional[str], max_per_user: int = 20) -> GoalStore:
    return GoalStore(url or "sqlite:///finance_data.sqlite3", max_per_user=max_per_user)

"""
Row store

Thin async data-access layer over the four inventory tables. Every
SQLAlchemy failure leaves this module as a StoreError.
"""

import functools
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, delete, func, distinct
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.exceptions import NotFoundError, StoreError
from partstock.models import OrderRegister, MonthlyData, InRegister, EditHistory

logger = logging.getLogger(__name__)

MONTHLY_FIELDS = ("inbound_qty", "outbound_qty", "stock_qty", "order_qty")


def _store_call(action: str):
    """Re-raise database failures of the wrapped call as StoreError"""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except SQLAlchemyError as e:
                message = str(getattr(e, "orig", None) or e)
                logger.error(f"Store call '{action}' failed: {message}")
                raise StoreError(f"{action} failed: {message}") from e
        return wrapper
    return decorator


class RecordStore:
    """Row-store operations used by the reconciler and the mutation coordinator"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ===== Order register =====

    @_store_call("find order")
    async def find_order(self, company: str, model: str, part_number: str) -> Optional[OrderRegister]:
        result = await self.db.execute(
            select(OrderRegister).where(
                OrderRegister.company == company,
                OrderRegister.model == model,
                OrderRegister.part_number == part_number,
            )
        )
        return result.scalar_one_or_none()

    @_store_call("load order")
    async def get_order(self, order_id: int) -> OrderRegister:
        order = await self.db.get(OrderRegister, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} does not exist")
        return order

    @_store_call("create order")
    async def create_order(self, **fields: Any) -> OrderRegister:
        order = OrderRegister(
            inbound_qty_total=0,
            outbound_qty_total=0,
            order_qty_total=0,
            **fields,
        )
        self.db.add(order)
        await self.db.flush()
        return order

    @_store_call("find or create order")
    async def get_or_create_order(
        self,
        company: str,
        model: str,
        part_number: str,
        part_name: str = "",
        note: str = "") -> Tuple[OrderRegister, bool]:
        """
        Look an order up by its natural key, inserting it when missing

        The insert runs in a savepoint; if a concurrent request inserted the
        same key first, the unique constraint rejects ours and the existing
        row is returned instead.

        Returns:
            (order, created)
        """
        order = await self.find_order(company, model, part_number)
        if order is not None:
            return order, False

        try:
            async with self.db.begin_nested():
                order = await self.create_order(
                    company=company,
                    model=model,
                    part_number=part_number,
                    part_name=part_name or "",
                    note=note or "",
                )
        except StoreError as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise
            existing = await self.find_order(company, model, part_number)
            if existing is None:
                raise
            logger.info(f"Order {company}/{model}/{part_number} was created concurrently, reusing id={existing.id}")
            return existing, False

        logger.info(f"Created order id={order.id} for {company}/{model}/{part_number}")
        return order, True

    @_store_call("update order")
    async def update_order(self, order: OrderRegister, **fields: Any) -> OrderRegister:
        for name, value in fields.items():
            setattr(order, name, value)
        await self.db.flush()
        return order

    @_store_call("delete order")
    async def delete_order(self, order_id: int) -> int:
        result = await self.db.execute(delete(OrderRegister).where(OrderRegister.id == order_id))
        return result.rowcount or 0

    @_store_call("list orders")
    async def list_orders(self) -> List[OrderRegister]:
        result = await self.db.execute(
            select(OrderRegister).order_by(OrderRegister.company, OrderRegister.display_order, OrderRegister.id)
        )
        return list(result.scalars().all())

    @_store_call("load options")
    async def distinct_options(self) -> Dict[str, List[str]]:
        """Distinct non-empty descriptive values, in first-seen order"""
        result = await self.db.execute(
            select(
                OrderRegister.company,
                OrderRegister.model,
                OrderRegister.part_number,
                OrderRegister.part_name,
            ).order_by(OrderRegister.company, OrderRegister.id)
        )
        options: Dict[str, List[str]] = {
            "companies": [], "models": [], "part_numbers": [], "part_names": [],
        }
        for row in result.all():
            for key, value in zip(options.keys(), row):
                if value and value not in options[key]:
                    options[key].append(value)
        return options

    # ===== Monthly overrides =====

    @_store_call("find monthly override")
    async def find_monthly_override(self, year_month: str, order_id: int) -> Optional[MonthlyData]:
        result = await self.db.execute(
            select(MonthlyData).where(
                MonthlyData.year_month == year_month,
                MonthlyData.order_id == order_id,
            )
        )
        return result.scalar_one_or_none()

    @_store_call("upsert monthly override")
    async def upsert_monthly_override(self, year_month: str, order_id: int, **fields: Any) -> MonthlyData:
        """Insert or replace the given quantity fields of one month's override"""
        unknown = set(fields) - set(MONTHLY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown monthly fields: {sorted(unknown)}")

        monthly = await self.find_monthly_override(year_month, order_id)
        if monthly is None:
            monthly = MonthlyData(year_month=year_month, order_id=order_id, **fields)
            self.db.add(monthly)
        else:
            for name, value in fields.items():
                setattr(monthly, name, value)
        await self.db.flush()
        return monthly

    @_store_call("delete monthly overrides")
    async def delete_monthly_overrides(self, year_month: str, order_id: Optional[int] = None) -> int:
        stmt = delete(MonthlyData).where(MonthlyData.year_month == year_month)
        if order_id is not None:
            stmt = stmt.where(MonthlyData.order_id == order_id)
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    @_store_call("delete order overrides")
    async def delete_order_overrides(self, order_id: int) -> int:
        result = await self.db.execute(delete(MonthlyData).where(MonthlyData.order_id == order_id))
        return result.rowcount or 0

    @_store_call("list monthly overrides")
    async def list_monthly_overrides(self, year_month: str) -> List[MonthlyData]:
        result = await self.db.execute(
            select(MonthlyData).where(MonthlyData.year_month == year_month)
        )
        return list(result.scalars().all())

    @_store_call("list months")
    async def list_months(self) -> List[str]:
        result = await self.db.execute(
            select(distinct(MonthlyData.year_month)).order_by(MonthlyData.year_month.desc())
        )
        return [row[0] for row in result.all()]

    # ===== Inbound register =====

    @_store_call("append inbound event")
    async def append_inbound_event(self, order_id: int, in_date: date, quantity: int) -> InRegister:
        event = InRegister(order_id=order_id, in_date=in_date, quantity=quantity)
        self.db.add(event)
        await self.db.flush()
        return event

    @_store_call("list inbound events")
    async def list_inbound_events_since(self, since: date) -> List[InRegister]:
        result = await self.db.execute(
            select(InRegister).where(InRegister.in_date >= since).order_by(InRegister.in_date)
        )
        return list(result.scalars().all())

    @_store_call("delete inbound events")
    async def delete_inbound_events(self, order_id: int) -> int:
        result = await self.db.execute(delete(InRegister).where(InRegister.order_id == order_id))
        return result.rowcount or 0

    # ===== Edit history =====

    @_store_call("append edit history")
    async def append_audit_entry(self, order_id: int, actor_name: str, changes: List[dict]) -> EditHistory:
        entry = EditHistory(order_id=order_id, actor_name=actor_name, changes=changes)
        self.db.add(entry)
        await self.db.flush()
        return entry

    @_store_call("list edit history")
    async def list_audit_entries(
        self,
        order_id: Optional[int] = None,
        page: int = 1,
        limit: int = 20) -> Tuple[List[EditHistory], int]:
        conditions = []
        if order_id is not None:
            conditions.append(EditHistory.order_id == order_id)

        count_query = select(func.count(EditHistory.id))
        query = select(EditHistory)
        if conditions:
            count_query = count_query.where(*conditions)
            query = query.where(*conditions)

        total = (await self.db.execute(count_query)).scalar() or 0

        query = query.order_by(EditHistory.created_at.desc(), EditHistory.id.desc())
        query = query.offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    @_store_call("delete edit history")
    async def delete_audit_entries(self, order_id: int) -> int:
        result = await self.db.execute(delete(EditHistory).where(EditHistory.order_id == order_id))
        return result.rowcount or 0

    # ===== Transaction =====

    @_store_call("commit")
    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

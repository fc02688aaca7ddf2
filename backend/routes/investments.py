"""Investment endpoints -- record an investment, view the portfolio."""

from __future__ import annotations

import datetime as dt
import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import distinct, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_session
from backend.errors import server_error
from backend.models import Investment, Startup, User
from backend.schemas import (
    InvestmentOut,
    InvestmentRequest,
    InvestmentResponse,
    PortfolioResponse,
)
from backend.security import require_kyc, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/investments", tags=["investments"])


class FundingExceeded(Exception):
    pass


def distinct_investors(startup_id: str):
    return (
        select(func.count(distinct(Investment.investor_id)))
        .where(Investment.startup_id == startup_id)
        .scalar_subquery()
    )


async def record_investment(
    session: AsyncSession, startup: Startup, investor: User, amount: float,
) -> Investment:
    """
    Add *amount* to the startup's round inside the current transaction.

    The counter only moves through one conditional UPDATE, so concurrent
    investors can never push ``current_amount`` past ``target_amount``;
    ``investor_count`` is recounted from the investments table afterwards.
    Raises FundingExceeded when the remaining requirement is too small.
    """
    result = await session.execute(
        update(Startup)
        .where(
            Startup.id == startup.id,
            Startup.status == "active",
            Startup.current_amount + amount <= Startup.target_amount,
        )
        .values(current_amount=Startup.current_amount + amount)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise FundingExceeded(startup.id)

    await session.execute(
        update(Startup)
        .where(Startup.id == startup.id, Startup.current_amount >= Startup.target_amount)
        .values(status="funded", funding_end_date=dt.datetime.utcnow())
        .execution_options(synchronize_session=False)
    )

    investment = Investment(
        investor_id=investor.id,
        startup_id=startup.id,
        amount=amount,
        current_value=amount,
        status="active",
        transaction_id=f"INV_{int(time.time() * 1000)}",
    )
    session.add(investment)
    await session.flush()

    await session.execute(
        update(Startup)
        .where(Startup.id == startup.id)
        .values(investor_count=distinct_investors(startup.id))
        .execution_options(synchronize_session=False)
    )

    await session.execute(
        update(User)
        .where(User.id == investor.id)
        .values(
            total_invested=User.total_invested + amount,
            portfolio_value=User.portfolio_value + amount,
        )
        .execution_options(synchronize_session=False)
    )
    return investment


@router.post("/", response_model=InvestmentResponse, status_code=201)
async def create_investment(
    req: InvestmentRequest,
    user: User = Depends(require_role("investor")),
    _kyc: User = Depends(require_kyc),
    session: AsyncSession = Depends(get_session),
):
    startup = await session.get(Startup, req.startup_id)
    if startup is None or startup.status != "active":
        raise HTTPException(
            status_code=404,
            detail="Startup not found or not accepting investments",
        )

    amount = req.amount
    minimum = startup.minimum_investment or 100
    if amount < minimum:
        raise HTTPException(status_code=400, detail=f"Minimum investment amount is {minimum:g}")
    if startup.maximum_investment and amount > startup.maximum_investment:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum investment amount is {startup.maximum_investment:g}",
        )

    try:
        investment = await record_investment(session, startup, user, amount)
        await session.commit()
    except FundingExceeded:
        await session.rollback()
        raise HTTPException(
            status_code=400,
            detail="Investment amount exceeds remaining funding requirement",
        )
    except SQLAlchemyError as e:
        await session.rollback()
        raise server_error("Investment failed", e)

    await session.refresh(startup)
    await session.refresh(investment)
    logger.info("Investor %s put %s into startup %s", user.id, amount, startup.id)

    out = InvestmentOut.model_validate(investment).model_copy(
        update={"startup_name": startup.name, "sector": startup.sector}
    )
    return InvestmentResponse(
        investment=out,
        startup_name=startup.name,
        funding_progress=startup.funding_progress,
        startup_status=startup.status,
    )


@router.get("/portfolio", response_model=PortfolioResponse)
async def portfolio(
    user: User = Depends(require_role("investor")),
    session: AsyncSession = Depends(get_session),
):
    rows = (
        await session.execute(
            select(Investment, Startup.name, Startup.sector)
            .join(Startup, Investment.startup_id == Startup.id)
            .where(Investment.investor_id == user.id)
            .order_by(Investment.created_at.desc(), Investment.id)
        )
    ).all()

    investments = [
        InvestmentOut.model_validate(inv).model_copy(update={"startup_name": name, "sector": sector})
        for inv, name, sector in rows
    ]
    await session.refresh(user)
    return PortfolioResponse(
        total_invested=user.total_invested or 0,
        portfolio_value=user.portfolio_value or 0,
        total_returns=user.total_returns or 0,
        investments=investments,
    )

"""
Bill Splitter - FastAPI Web Backend

This module exposes the bill splitter ledger over HTTP using FastAPI.

Features:
    - RESTful API for managing participants and expenses
    - Balance and settlement calculations
    - Per-participant transparency reports

Endpoints:
    POST   /participants            - Add participant
    GET    /participants            - List participants
    DELETE /participants/{id}       - Remove participant (cascades)
    POST   /expenses                - Add expense
    PUT    /expenses/{id}           - Add or replace expense with this id
    GET    /expenses                - List expenses with total
    GET    /expenses/{id}           - Get one expense
    DELETE /expenses/{id}           - Delete expense
    GET    /calculate               - Recompute and return results
    GET    /summary                 - Get last computed results
    POST   /reset                   - Clear everything

Usage:
    uvicorn bill_splitter.main:app --reload
"""

from typing import Optional
from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

# Import business logic modules
from bill_splitter.config import configure_logging, get_store
from bill_splitter.participants import add_participant, get_participants, remove_participant, Person
from bill_splitter.expenses import (
    delete_expense,
    get_expense,
    get_expenses,
    total_expenses,
    upsert_expense,
    Expense
)
from bill_splitter.store import LedgerStore, clear_all, recompute_results
from bill_splitter.utils import explain_all_participants, format_settlement


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class ParticipantCreate(BaseModel):
    """Request model for adding a participant."""
    name: str = Field(..., min_length=1, description="Participant name")


class ParticipantResponse(BaseModel):
    """Response model for participant data."""
    participant_id: str
    name: str


class ExpenseCreate(BaseModel):
    """Request model for adding or replacing an expense."""
    description: str = Field(..., min_length=1, description="What the expense was for")
    amount: float = Field(..., gt=0, description="Expense amount (must be > 0)")
    payer_id: str = Field(..., min_length=1, description="Participant ID of payer")
    sharer_ids: list[str] = Field(..., min_length=1, description="Participant IDs sharing the cost")


class ExpenseResponse(BaseModel):
    """Response model for expense data."""
    expense_id: str
    description: str
    amount: float
    payer_id: str
    sharer_ids: list[str]


class ExpenseListResponse(BaseModel):
    """Response model for the expense list."""
    expenses: list[ExpenseResponse]
    total: float


class BalanceResponse(BaseModel):
    """Response model for one participant's balance."""
    participant_id: str
    name: str
    total_paid: float
    total_owed: float
    balance: float


class SettlementResponse(BaseModel):
    """Response model for one settlement transaction."""
    from_participant: str
    to_participant: str
    from_name: str
    to_name: str
    amount: float
    description: str


class ContributionResponse(BaseModel):
    """One expense in a participant's breakdown."""
    expense_id: str
    description: str
    total_expense_amount: float
    paid_by: str
    sharers: list[str]
    num_sharers: int
    participant_share: float


class ExplanationResponse(BaseModel):
    """Breakdown of one participant's share."""
    participant_id: str
    name: Optional[str]
    expense_contributions: list[ContributionResponse]
    total_owed: float
    total_paid: float
    balance: float


class CalculateResponse(BaseModel):
    """Response model for calculation results."""
    balances: list[BalanceResponse]
    settlements: list[SettlementResponse]
    total_expenses: float
    explanations: list[ExplanationResponse]


class SummaryResponse(BaseModel):
    """Response model for stored results."""
    balances: list[BalanceResponse]
    settlements: list[SettlementResponse]
    updated_at: str


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Bill Splitter",
    description="Track shared expenses and settle up with as few payments as possible",
    version="1.0.0"
)


# =============================================================================
# Helper Functions
# =============================================================================

def _participant_response(p: Person) -> ParticipantResponse:
    return ParticipantResponse(participant_id=p.participant_id, name=p.name)


def _expense_response(e: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        expense_id=e.expense_id,
        description=e.description,
        amount=float(e.amount),
        payer_id=e.payer_id,
        sharer_ids=e.sharer_ids
    )


def _balance_response(b) -> BalanceResponse:
    return BalanceResponse(
        participant_id=b.participant_id,
        name=b.name,
        total_paid=float(b.total_paid),
        total_owed=float(b.total_owed),
        balance=float(b.balance)
    )


def _settlement_response(s) -> SettlementResponse:
    return SettlementResponse(
        from_participant=s.from_participant,
        to_participant=s.to_participant,
        from_name=s.from_name,
        to_name=s.to_name,
        amount=float(s.rounded_amount),
        description=format_settlement(s)
    )


def _explanation_response(data: dict) -> ExplanationResponse:
    return ExplanationResponse(
        participant_id=data["participant_id"],
        name=data["name"],
        expense_contributions=[
            ContributionResponse(
                expense_id=c["expense_id"],
                description=c["description"],
                total_expense_amount=float(c["total_expense_amount"]),
                paid_by=c["paid_by"],
                sharers=c["sharers"],
                num_sharers=c["num_sharers"],
                participant_share=float(c["participant_share"])
            )
            for c in data["expense_contributions"]
        ],
        total_owed=float(data["total_owed"]),
        total_paid=float(data["total_paid"]),
        balance=float(data["balance"])
    )


def _save_expense(store: LedgerStore, expense_data: ExpenseCreate, expense_id: Optional[str] = None) -> ExpenseResponse:
    expense = upsert_expense(
        store,
        description=expense_data.description,
        amount=expense_data.amount,
        payer_id=expense_data.payer_id,
        sharer_ids=expense_data.sharer_ids,
        expense_id=expense_id
    )
    return _expense_response(expense)


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/participants", response_model=ParticipantResponse, status_code=201)
def create_participant(participant_data: ParticipantCreate, store: LedgerStore = Depends(get_store)):
    """
    Add a participant.

    Request flow:
        1. Validate input using Pydantic model
        2. Call add_participant() from participants.py
        3. Return created participant data
    """
    try:
        return _participant_response(add_participant(store, participant_data.name))

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/participants", response_model=list[ParticipantResponse])
def list_participants(store: LedgerStore = Depends(get_store)):
    """List participants in registration order."""
    return [_participant_response(p) for p in get_participants(store)]


@app.delete("/participants/{participant_id}", status_code=204)
def delete_participant(participant_id: str, store: LedgerStore = Depends(get_store)):
    """Remove a participant; expenses left without sharers are deleted too."""
    remove_participant(store, participant_id)
    return Response(status_code=204)


@app.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(expense_data: ExpenseCreate, store: LedgerStore = Depends(get_store)):
    """
    Add an expense.

    Request flow:
        1. Validate input using Pydantic model
        2. Call upsert_expense() from expenses.py
        3. Return created expense data
    """
    try:
        return _save_expense(store, expense_data)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.put("/expenses/{expense_id}", response_model=ExpenseResponse)
def replace_expense(expense_id: str, expense_data: ExpenseCreate, store: LedgerStore = Depends(get_store)):
    """Replace the expense with this id, or add it if there is none."""
    try:
        return _save_expense(store, expense_data, expense_id=expense_id)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/expenses", response_model=ExpenseListResponse)
def list_expenses(store: LedgerStore = Depends(get_store)):
    """List expenses with the running total."""
    with store.lock:
        expenses = get_expenses(store)
        total = total_expenses(store)
    return ExpenseListResponse(
        expenses=[_expense_response(e) for e in expenses],
        total=float(total)
    )


@app.get("/expenses/{expense_id}", response_model=ExpenseResponse)
def read_expense(expense_id: str, store: LedgerStore = Depends(get_store)):
    expense = get_expense(store, expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail=f"Expense {expense_id} not found")
    return _expense_response(expense)


@app.delete("/expenses/{expense_id}", status_code=204)
def remove_expense(expense_id: str, store: LedgerStore = Depends(get_store)):
    delete_expense(store, expense_id)
    return Response(status_code=204)


@app.get("/calculate", response_model=CalculateResponse)
def calculate_results(store: LedgerStore = Depends(get_store)):
    """
    Recompute and return all results.

    Request flow:
        1. Calculate balances and settlements (store.py)
        2. Generate explanations (utils.py)
        3. Return complete results
    """
    try:
        with store.lock:
            balances, settlements = recompute_results(store)
            participants = get_participants(store)
            expenses = get_expenses(store)
            total = total_expenses(store)

        explanations = explain_all_participants(participants, expenses, balances)

        return CalculateResponse(
            balances=[_balance_response(b) for b in balances],
            settlements=[_settlement_response(s) for s in settlements],
            total_expenses=float(total),
            explanations=[_explanation_response(x) for x in explanations]
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/summary", response_model=SummaryResponse)
def get_summary(store: LedgerStore = Depends(get_store)):
    """Return the last computed results; 404 if a mutation invalidated them."""
    results = store.results
    if results is None:
        raise HTTPException(
            status_code=404,
            detail="No results found. Call /calculate first."
        )
    return SummaryResponse(
        balances=[_balance_response(b) for b in results.balances],
        settlements=[_settlement_response(s) for s in results.settlements],
        updated_at=results.updated_at
    )


@app.post("/reset", status_code=204)
def reset_ledger(store: LedgerStore = Depends(get_store)):
    """Remove all participants, expenses and results."""
    clear_all(store)
    return Response(status_code=204)


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "Bill Splitter"}


# =============================================================================
# Run with: python -m bill_splitter.main
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    configure_logging()
    uvicorn.run("bill_splitter.main:app", host="127.0.0.1", port=8000, reload=True)

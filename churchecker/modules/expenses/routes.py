from fastapi import APIRouter, Depends
from datetime import date
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.expenses.schemas import (
    ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseSummaryResponse, ExpenseCategory
)
from churchecker.modules.expenses.service import ExpenseService
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/churches/{church_id}/expenses", tags=["expenses"])


def get_expense_service(supabase: Client = Depends(get_supabase)) -> ExpenseService:
    return ExpenseService(supabase)


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    category: Optional[ExpenseCategory] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: ExpenseService = Depends(get_expense_service)
):
    """List expenses, newest first"""
    return service.list_expenses(access.church_id, category, start, end)


@router.get("/summary", response_model=ExpenseSummaryResponse)
async def get_expense_summary(
    access: ChurchAccess = Depends(require_church_member),
    service: ExpenseService = Depends(get_expense_service)
):
    return service.get_summary(access.church_id)


@router.post("", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    expense_data: ExpenseCreate,
    access: ChurchAccess = Depends(require_church_capability("ledger:write")),
    service: ExpenseService = Depends(get_expense_service)
):
    """Record an expense (church admin)"""
    return service.create_expense(access.church_id, expense_data, access.user_id)


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: ExpenseService = Depends(get_expense_service)
):
    return service.get_record(access.church_id, expense_id)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: str,
    expense_data: ExpenseUpdate,
    access: ChurchAccess = Depends(require_church_capability("ledger:write")),
    service: ExpenseService = Depends(get_expense_service)
):
    return service.update_expense(access.church_id, expense_id, expense_data)


@router.delete("/{expense_id}", status_code=204)
async def delete_expense(
    expense_id: str,
    access: ChurchAccess = Depends(require_church_capability("ledger:write")),
    service: ExpenseService = Depends(get_expense_service)
):
    service.delete_record(access.church_id, expense_id)
    return None

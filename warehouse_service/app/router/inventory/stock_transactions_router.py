from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_staff, validate_current_token
from shared.core.database import get_warehouse_db as get_db
from shared.core.exceptions import NotFoundError
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import stock_transactions_crud as crud
from ...schemas.inventory.stock_transactions_schemas import (
    StockTransactionCreate, StockTransactionOut, StockTransactionsRequest,
    StockTransactionsResponse, StockTransactionUpdate,
)

router = APIRouter(prefix="/api/transactions",
                   tags=["transactions"], dependencies=[Depends(validate_current_token)])


@router.get("/", response_model=StockTransactionsResponse)
def read_transactions(params: StockTransactionsRequest = Depends(), db: Session = Depends(get_db)):
    return crud.list_transactions(db, params)


@router.get("/{tx_id}", response_model=StockTransactionOut)
def read_transaction(tx_id: str, db: Session = Depends(get_db)):
    return crud.get_transaction_or_404(db, tx_id)


@router.post("/", response_model=None)
def create_transaction(
    payload: StockTransactionCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    result = crud.create_transaction(db, payload, current_user)
    return success_response(
        data=StockTransactionOut.model_validate(result),
        message="Transaction recorded successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/{tx_id}", response_model=None)
def update_transaction(
    tx_id: str,
    payload: StockTransactionUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    result = crud.update_transaction(db, tx_id, payload, current_user)
    return success_response(
        data=StockTransactionOut.model_validate(result),
        message="Transaction updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{tx_id}", response_model=None, dependencies=[Depends(allow_staff)])
def delete_transaction(tx_id: str, db: Session = Depends(get_db)):
    if not crud.delete_transaction(db, tx_id):
        raise NotFoundError("Transaction not found", "delete_transaction", tx_id)
    return success_response(
        data={"id": tx_id},
        message="Transaction deleted and stock reverted",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )

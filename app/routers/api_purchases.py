from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..crud.purchases import (
    create_purchase,
    delete_purchase,
    list_purchases,
    require_purchase,
    update_purchase,
)
from ..db.session import get_db
from ..deps.auth import require_actor
from ..schemas.purchase import PurchaseCreate, PurchaseOut, PurchaseUpdate

router = APIRouter(prefix="/api/v1/purchases", tags=["purchases"])


@router.get("", response_model=list[PurchaseOut])
def api_list_purchases(
    start_date: date | None = None,
    end_date: date | None = None,
    vendor_id: int | None = None,
    actor: str = Depends(require_actor),
    db: Session = Depends(get_db),
):
    return list_purchases(db, start_date=start_date, end_date=end_date, vendor_id=vendor_id)


@router.post("", response_model=PurchaseOut, status_code=201)
def api_create_purchase(
    payload: PurchaseCreate,
    actor: str = Depends(require_actor),
    db: Session = Depends(get_db),
):
    return create_purchase(db, **payload.model_dump(), actor=actor)


@router.get("/{purchase_id}", response_model=PurchaseOut)
def api_get_purchase(purchase_id: str, actor: str = Depends(require_actor), db: Session = Depends(get_db)):
    return require_purchase(db, purchase_id)


@router.patch("/{purchase_id}", response_model=PurchaseOut)
def api_update_purchase(
    purchase_id: str,
    payload: PurchaseUpdate,
    actor: str = Depends(require_actor),
    db: Session = Depends(get_db),
):
    return update_purchase(db, purchase_id, quantity=payload.quantity, unit_price=payload.unit_price, actor=actor)


@router.delete("/{purchase_id}")
def api_delete_purchase(purchase_id: str, actor: str = Depends(require_actor), db: Session = Depends(get_db)):
    deleted = delete_purchase(db, purchase_id, actor=actor)
    return {"status": "deleted", "purchase_id": deleted}

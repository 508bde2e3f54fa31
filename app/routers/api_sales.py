from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..crud.sales import create_sale, delete_sale, list_sales, require_sale, update_sale
from ..db.session import get_db
from ..deps.auth import require_actor
from ..schemas.sale import SaleCreate, SaleOut, SaleUpdate

router = APIRouter(prefix="/api/v1/sales", tags=["sales"])


@router.get("", response_model=list[SaleOut])
def api_list_sales(
    start_date: date | None = None,
    end_date: date | None = None,
    customer_id: str | None = None,
    actor: str = Depends(require_actor),
    db: Session = Depends(get_db),
):
    return list_sales(db, start_date=start_date, end_date=end_date, customer_id=customer_id)


@router.post("", response_model=SaleOut, status_code=201)
def api_create_sale(payload: SaleCreate, actor: str = Depends(require_actor), db: Session = Depends(get_db)):
    return create_sale(db, **payload.model_dump(), actor=actor)


@router.get("/{sale_id}", response_model=SaleOut)
def api_get_sale(sale_id: str, actor: str = Depends(require_actor), db: Session = Depends(get_db)):
    return require_sale(db, sale_id)


@router.patch("/{sale_id}", response_model=SaleOut)
def api_update_sale(
    sale_id: str,
    payload: SaleUpdate,
    actor: str = Depends(require_actor),
    db: Session = Depends(get_db),
):
    return update_sale(db, sale_id, quantity=payload.quantity, unit_price=payload.unit_price, actor=actor)


@router.delete("/{sale_id}")
def api_delete_sale(sale_id: str, actor: str = Depends(require_actor), db: Session = Depends(get_db)):
    deleted = delete_sale(db, sale_id, actor=actor)
    return {"status": "deleted", "sale_id": deleted}

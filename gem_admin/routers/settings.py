import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gem_admin.models.session import get_db
from gem_admin.models.settings import get_or_create_settings, merge_settings
from gem_admin.schemas.settings import SettingsUpdate
from gem_admin.schemas.user import DashboardSession
from gem_admin.utils.security import get_current_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_dashboard_settings(db: Session = Depends(get_db), session: DashboardSession = Depends(get_current_session)):
    row = get_or_create_settings(db)
    return {**row.data, "updatedAt": row.updated_at}


@router.put("")
def update_dashboard_settings(
    payload: SettingsUpdate,
    db: Session = Depends(get_db),
    session: DashboardSession = Depends(get_current_session),
):
    changes = payload.changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No valid fields provided")
    row = get_or_create_settings(db)
    # Reassign so SQLAlchemy sees the JSON column change
    row.data = merge_settings(row.data, changes)
    db.commit()
    db.refresh(row)
    logger.info("Settings updated by %s: %s", session.user.email, ", ".join(sorted(changes)))
    return {"message": "Settings saved", **row.data, "updatedAt": row.updated_at}

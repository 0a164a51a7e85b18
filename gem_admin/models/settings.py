from copy import deepcopy
from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, JSON
from sqlalchemy.orm import Session

from gem_admin.models.session import Base


DEFAULT_SETTINGS = {
    "companyName": "Admin Dashboard",
    "adminEmail": "admin@example.com",
    "notifications": {
        "newOrders": True,
        "lowStock": True,
        "consultations": True,
        "systemUpdates": False,
    },
    "security": {"twoFactor": False, "sessionTimeout": "30"},
    "system": {"autoBackup": True, "maintenanceMode": False},
    "appearance": {"theme": "light", "compactMode": False},
    "email": {"smtpServer": "", "smtpPort": "587", "enabled": False},
    "payment": {"currency": "USD", "stripeEnabled": False, "paypalEnabled": False},
    "localization": {"language": "en", "timezone": "UTC", "dateFormat": "MM/DD/YYYY"},
    "dataManagement": {"autoExport": False, "retentionDays": "365"},
}


class DashboardSettings(Base):
    __tablename__ = "dashboard_settings"
    id = Column(Integer, primary_key=True, index=True)
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def get_or_create_settings(db: Session) -> DashboardSettings:
    row = db.query(DashboardSettings).first()
    if not row:
        row = DashboardSettings(data=deepcopy(DEFAULT_SETTINGS))
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def merge_settings(current: dict, changes: dict) -> dict:
    """Apply a partial update: top-level scalars replace, sections merge key by key.

    Unknown sections and keys are ignored so the stored document keeps the
    shape of DEFAULT_SETTINGS.
    """
    merged = deepcopy(current)
    for key, value in (changes or {}).items():
        if key not in DEFAULT_SETTINGS:
            continue
        default = DEFAULT_SETTINGS[key]
        if isinstance(default, dict):
            if not isinstance(value, dict):
                continue
            section = dict(merged.get(key) or default)
            for sub_key, sub_value in value.items():
                if sub_key in default:
                    section[sub_key] = sub_value
            merged[key] = section
        else:
            merged[key] = value
    return merged

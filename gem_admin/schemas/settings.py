from pydantic import BaseModel, ConfigDict
from typing import Optional


class NotificationSettings(BaseModel):
    newOrders: Optional[bool] = None
    lowStock: Optional[bool] = None
    consultations: Optional[bool] = None
    systemUpdates: Optional[bool] = None


class SecuritySettings(BaseModel):
    twoFactor: Optional[bool] = None
    sessionTimeout: Optional[str] = None


class SystemSettings(BaseModel):
    autoBackup: Optional[bool] = None
    maintenanceMode: Optional[bool] = None


class AppearanceSettings(BaseModel):
    theme: Optional[str] = None
    compactMode: Optional[bool] = None


class EmailSettings(BaseModel):
    smtpServer: Optional[str] = None
    smtpPort: Optional[str] = None
    enabled: Optional[bool] = None


class PaymentSettings(BaseModel):
    currency: Optional[str] = None
    stripeEnabled: Optional[bool] = None
    paypalEnabled: Optional[bool] = None


class LocalizationSettings(BaseModel):
    language: Optional[str] = None
    timezone: Optional[str] = None
    dateFormat: Optional[str] = None


class DataManagementSettings(BaseModel):
    autoExport: Optional[bool] = None
    retentionDays: Optional[str] = None


class SettingsUpdate(BaseModel):
    """Partial settings update; omitted sections and keys keep their stored values."""
    model_config = ConfigDict(extra="ignore")

    companyName: Optional[str] = None
    adminEmail: Optional[str] = None
    notifications: Optional[NotificationSettings] = None
    security: Optional[SecuritySettings] = None
    system: Optional[SystemSettings] = None
    appearance: Optional[AppearanceSettings] = None
    email: Optional[EmailSettings] = None
    payment: Optional[PaymentSettings] = None
    localization: Optional[LocalizationSettings] = None
    dataManagement: Optional[DataManagementSettings] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)

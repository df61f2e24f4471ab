# backend/beautyplaza/services/settings_service.py
"""
Application settings service for the Beauty Plaza platform.

Runtime-editable key/value settings stored in the database, distinct from
the environment-driven ``core.config.settings``.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException
from ..models.setting import Setting
from ..repositories.factory import RepositoryFactory
from ..repositories.setting_repository import SettingRepository
from ..schemas.setting import SettingCreate, SettingUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class SettingsService(BaseService):
    def __init__(self, db: Session, repository: Optional[SettingRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_setting_repository(db)

    def _get_or_404(self, key: str) -> Setting:
        setting = self.repository.get_by_id(key)
        if not setting:
            raise NotFoundException.for_resource("Setting", "key", key)
        return setting

    @BaseService.measure_operation("list_settings")
    def list_settings(self) -> List[Setting]:
        return self.repository.list_settings()

    @BaseService.measure_operation("get_setting")
    def get_setting(self, key: str) -> Setting:
        return self._get_or_404(key)

    @BaseService.measure_operation("create_setting")
    def create_setting(self, data: SettingCreate) -> Setting:
        if self.repository.get_by_id(data.key):
            raise ConflictException(
                f"Setting already exists with key: '{data.key}'", code="SETTING_EXISTS"
            )
        with self.transaction():
            setting = self.repository.create(**data.model_dump())
        self.log_operation("create_setting", key=data.key)
        return setting

    @BaseService.measure_operation("update_setting")
    def update_setting(self, key: str, data: SettingUpdate) -> Setting:
        changes = data.model_dump(exclude_unset=True)
        with self.transaction():
            setting = self._get_or_404(key)
            for field, value in changes.items():
                if field != "value" and value is None:
                    continue
                setattr(setting, field, value)
            self.repository.flush()
        self.log_operation("update_setting", key=key)
        return setting

    @BaseService.measure_operation("delete_setting")
    def delete_setting(self, key: str) -> None:
        with self.transaction():
            if not self.repository.delete(key):
                raise NotFoundException.for_resource("Setting", "key", key)
        self.log_operation("delete_setting", key=key)

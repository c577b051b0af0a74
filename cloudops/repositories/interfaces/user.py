from abc import ABC, abstractmethod
from typing import Optional
from cloudops.database import models

class IUserRepository(ABC):
    @abstractmethod
    def find_by_username(self, username: str) -> Optional[models.User]:
        """사용자 이름으로 특정 사용자를 조회합니다."""
        pass

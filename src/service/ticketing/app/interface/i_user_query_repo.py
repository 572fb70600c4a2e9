from abc import ABC, abstractmethod


class IUserQueryRepo(ABC):
    """用戶查詢倉庫抽象介面 - only existence is consumed by the ticket engine"""

    @abstractmethod
    async def exists(self, *, user_id: str) -> bool:
        pass

from abc import ABC, abstractmethod
from typing import List, Optional, Any
from cloudops.database import models

class IResourceRepository(ABC):
    """
    ECS/ELB/RDS 리소스 저장소의 공통 계약입니다.
    리소스 종류별로 하나의 구현체가 존재하며, 모두 같은 메서드 집합을 가집니다.
    """

    @abstractmethod
    def list_all(self) -> List[Any]:
        """바인딩된 노드 정보를 함께 로드하여 모든 리소스를 조회합니다."""
        pass

    @abstractmethod
    def find_by_id(self, resource_id: int) -> Optional[Any]:
        """고유 ID로 리소스를 조회합니다. (바인딩된 노드 포함)"""
        pass

    @abstractmethod
    def find_by_id_no_preload(self, resource_id: int) -> Optional[Any]:
        """고유 ID로 리소스를 연관 정보 없이 조회합니다."""
        pass

    @abstractmethod
    def create(self, resource_model: Any) -> Any:
        """새로운 리소스를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def update(self, resource_model: Any) -> Any:
        """변경된 리소스를 데이터베이스에 반영합니다."""
        pass

    @abstractmethod
    def delete(self, resource: Any) -> bool:
        """특정 리소스를 데이터베이스에서 삭제합니다."""
        pass

    @abstractmethod
    def add_bind_node(self, resource: Any, node: models.TreeNode) -> bool:
        """
        리소스와 트리 노드 사이의 바인딩이 존재하도록 보장합니다.

        Returns:
            새로 바인딩을 만들었으면 True, 이미 존재해서 아무것도 하지 않았으면 False.
        """
        pass

    @abstractmethod
    def remove_bind_node(self, resource: Any, node: models.TreeNode) -> bool:
        """
        리소스와 트리 노드 사이의 바인딩이 존재하지 않도록 보장합니다.

        Returns:
            바인딩을 삭제했으면 True, 원래 없어서 아무것도 하지 않았으면 False.
        """
        pass

    @abstractmethod
    def count_by_node_id(self, node_id: int) -> int:
        """특정 트리 노드에 바인딩된 리소스의 개수를 조회합니다."""
        pass

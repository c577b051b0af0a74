from abc import ABC, abstractmethod
from typing import List, Optional
from cloudops.database import models

class ITreeNodeRepository(ABC):
    @abstractmethod
    def list_all(self) -> List[models.TreeNode]:
        """담당자(사용자) 연관 정보를 함께 로드하여 모든 트리 노드를 조회합니다."""
        pass

    @abstractmethod
    def list_all_no_preload(self) -> List[models.TreeNode]:
        """연관 정보를 로드하지 않고 모든 트리 노드를 조회합니다. (트리 순회용)"""
        pass

    @abstractmethod
    def find_by_id(self, node_id: int) -> Optional[models.TreeNode]:
        """고유 ID로 특정 트리 노드를 조회합니다. (담당자 정보 포함)"""
        pass

    @abstractmethod
    def find_by_id_no_preload(self, node_id: int) -> Optional[models.TreeNode]:
        """고유 ID로 특정 트리 노드를 연관 정보 없이 조회합니다."""
        pass

    @abstractmethod
    def list_by_pid(self, pid: int) -> List[models.TreeNode]:
        """특정 부모 노드의 직계 자식 노드 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_by_level(self, level: int) -> List[models.TreeNode]:
        """특정 계층(level)에 속한 노드 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_leaves(self) -> List[models.TreeNode]:
        """리프(is_leaf=1) 노드 목록을 조회합니다."""
        pass

    @abstractmethod
    def create(self, node_model: models.TreeNode) -> models.TreeNode:
        """새로운 트리 노드를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def update(self, node_model: models.TreeNode) -> models.TreeNode:
        """변경된 트리 노드(담당자 연관 포함)를 데이터베이스에 반영합니다."""
        pass

    @abstractmethod
    def delete(self, node: models.TreeNode) -> bool:
        """특정 트리 노드를 데이터베이스에서 삭제합니다."""
        pass

    @abstractmethod
    def has_children(self, node_id: int) -> bool:
        """해당 노드를 부모로 하는 자식 노드가 하나라도 있는지 확인합니다."""
        pass

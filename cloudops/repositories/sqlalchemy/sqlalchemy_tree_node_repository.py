from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from cloudops.database import models
from cloudops.repositories.interfaces import ITreeNodeRepository

class SqlalchemyTreeNodeRepository(ITreeNodeRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def _query_with_users(self):
        return self.db.query(models.TreeNode).options(
            selectinload(models.TreeNode.ops_admins),
            selectinload(models.TreeNode.rd_admins),
            selectinload(models.TreeNode.rd_members),
        )

    def list_all(self) -> List[models.TreeNode]:
        return self._query_with_users().order_by(models.TreeNode.id.asc()).all()

    def list_all_no_preload(self) -> List[models.TreeNode]:
        return self.db.query(models.TreeNode).order_by(models.TreeNode.id.asc()).all()

    def find_by_id(self, node_id: int) -> Optional[models.TreeNode]:
        return self._query_with_users().filter(models.TreeNode.id == node_id).first()

    def find_by_id_no_preload(self, node_id: int) -> Optional[models.TreeNode]:
        return self.db.query(models.TreeNode).filter(models.TreeNode.id == node_id).first()

    def list_by_pid(self, pid: int) -> List[models.TreeNode]:
        return self._query_with_users().filter(models.TreeNode.pid == pid).order_by(models.TreeNode.id.asc()).all()

    def list_by_level(self, level: int) -> List[models.TreeNode]:
        return self._query_with_users().filter(models.TreeNode.level == level).order_by(models.TreeNode.id.asc()).all()

    def list_leaves(self) -> List[models.TreeNode]:
        return self._query_with_users().filter(models.TreeNode.is_leaf == 1).order_by(models.TreeNode.id.asc()).all()

    def create(self, node_model: models.TreeNode) -> models.TreeNode:
        self.db.add(node_model)
        self.db.commit()
        self.db.refresh(node_model)
        return node_model

    def update(self, node_model: models.TreeNode) -> models.TreeNode:
        self.db.add(node_model)
        self.db.commit()
        self.db.refresh(node_model)
        return node_model

    def delete(self, node: models.TreeNode) -> bool:
        if node:
            self.db.delete(node)
            self.db.commit()
            return True
        return False

    def has_children(self, node_id: int) -> bool:
        return self.db.query(models.TreeNode.id).filter(models.TreeNode.pid == node_id).first() is not None

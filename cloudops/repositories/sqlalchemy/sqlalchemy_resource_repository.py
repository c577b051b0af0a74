import logging
from typing import List, Optional, Any
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload
from cloudops.database import models
from cloudops.repositories.interfaces import IResourceRepository

logger = logging.getLogger(__name__)


class SqlalchemyResourceRepository(IResourceRepository):
    """
    리소스 종류별 저장소의 공통 구현입니다.
    하위 클래스는 model(ORM 클래스)과 bind_table(바인딩 edge 테이블)만 지정합니다.

    바인딩은 ORM 컬렉션이 아니라 edge 테이블에 직접 INSERT/DELETE 하며,
    실행 전에 edge 존재 여부를 확인하므로 같은 요청을 반복해도 상태가 바뀌지 않습니다.
    """
    model = None
    bind_table = None

    def __init__(self, db_session: Session):
        self.db = db_session

    def list_all(self) -> List[Any]:
        return self.db.query(self.model).options(
            selectinload(self.model.bind_nodes)
        ).order_by(self.model.id.asc()).all()

    def find_by_id(self, resource_id: int) -> Optional[Any]:
        return self.db.query(self.model).options(
            selectinload(self.model.bind_nodes)
        ).filter(self.model.id == resource_id).first()

    def find_by_id_no_preload(self, resource_id: int) -> Optional[Any]:
        return self.db.query(self.model).filter(self.model.id == resource_id).first()

    def create(self, resource_model: Any) -> Any:
        self.db.add(resource_model)
        self.db.commit()
        self.db.refresh(resource_model)
        return resource_model

    def update(self, resource_model: Any) -> Any:
        self.db.add(resource_model)
        self.db.commit()
        self.db.refresh(resource_model)
        return resource_model

    def delete(self, resource: Any) -> bool:
        if resource:
            self.db.delete(resource)
            self.db.commit()
            return True
        return False

    def _edge_exists(self, resource_id: int, node_id: int) -> bool:
        statement = select(self.bind_table.c.resource_id).where(
            self.bind_table.c.resource_id == resource_id,
            self.bind_table.c.tree_node_id == node_id,
        )
        return self.db.execute(statement).first() is not None

    def add_bind_node(self, resource: Any, node: models.TreeNode) -> bool:
        if self._edge_exists(resource.id, node.id):
            logger.debug("%s %s already bound to node %s", self.bind_table.name, resource.id, node.id)
            return False
        self.db.execute(self.bind_table.insert().values(resource_id=resource.id, tree_node_id=node.id))
        self.db.commit()
        return True

    def remove_bind_node(self, resource: Any, node: models.TreeNode) -> bool:
        if not self._edge_exists(resource.id, node.id):
            logger.debug("%s %s not bound to node %s", self.bind_table.name, resource.id, node.id)
            return False
        self.db.execute(self.bind_table.delete().where(
            self.bind_table.c.resource_id == resource.id,
            self.bind_table.c.tree_node_id == node.id,
        ))
        self.db.commit()
        return True

    def count_by_node_id(self, node_id: int) -> int:
        statement = select(func.count()).select_from(self.bind_table).where(
            self.bind_table.c.tree_node_id == node_id
        )
        return self.db.execute(statement).scalar_one()


class SqlalchemyEcsRepository(SqlalchemyResourceRepository):
    model = models.ResourceEcs
    bind_table = models.resource_ecs_bind_nodes


class SqlalchemyElbRepository(SqlalchemyResourceRepository):
    model = models.ResourceElb
    bind_table = models.resource_elb_bind_nodes


class SqlalchemyRdsRepository(SqlalchemyResourceRepository):
    model = models.ResourceRds
    bind_table = models.resource_rds_bind_nodes

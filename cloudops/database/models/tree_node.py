from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base
from .association import (
    tree_node_ops_admins,
    tree_node_rd_admins,
    tree_node_rd_members,
    resource_ecs_bind_nodes,
    resource_elb_bind_nodes,
    resource_rds_bind_nodes,
)

class TreeNode(Base):
    """
    서비스 트리의 노드(팀/프로젝트/환경)를 나타냅니다.
    pid가 0이면 최상위(root) 노드이며 level은 1입니다.
    is_leaf가 1인 노드는 자식을 가질 수 없고, 클라우드 리소스가 바인딩되는 단위입니다.

    화면 표시용 key/value/children은 DB에 저장하지 않으며, 모델 속성으로도 두지 않습니다.
    (cloudops.utils.serializers 에서 dict 뷰로만 생성)
    """
    __tablename__ = "tree_nodes"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    pid = Column(Integer, nullable=False, default=0, index=True)
    level = Column(Integer, nullable=False, default=1, index=True)
    is_leaf = Column(Integer, nullable=False, default=0)
    desc = Column(String, nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    ops_admins = relationship("User", secondary=tree_node_ops_admins)
    rd_admins = relationship("User", secondary=tree_node_rd_admins)
    rd_members = relationship("User", secondary=tree_node_rd_members)

    bind_ecs = relationship("ResourceEcs", secondary=resource_ecs_bind_nodes, back_populates="bind_nodes")
    bind_elb = relationship("ResourceElb", secondary=resource_elb_bind_nodes, back_populates="bind_nodes")
    bind_rds = relationship("ResourceRds", secondary=resource_rds_bind_nodes, back_populates="bind_nodes")

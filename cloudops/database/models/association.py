from sqlalchemy import Table, Column, Integer, ForeignKey
from ..database import Base

# ---------------------------------------------------------------------------
# 트리 노드 <-> 사용자 (담당자 역할별) 연관 테이블
# ---------------------------------------------------------------------------
tree_node_ops_admins = Table(
    "tree_node_ops_admins",
    Base.metadata,
    Column("tree_node_id", Integer, ForeignKey("tree_nodes.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
)

tree_node_rd_admins = Table(
    "tree_node_rd_admins",
    Base.metadata,
    Column("tree_node_id", Integer, ForeignKey("tree_nodes.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
)

tree_node_rd_members = Table(
    "tree_node_rd_members",
    Base.metadata,
    Column("tree_node_id", Integer, ForeignKey("tree_nodes.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
)

# ---------------------------------------------------------------------------
# 리소스 <-> 트리 노드 바인딩 (edge) 테이블
# (resource_id, tree_node_id) 쌍 자체가 바인딩의 식별자입니다.
# ---------------------------------------------------------------------------
resource_ecs_bind_nodes = Table(
    "resource_ecs_bind_nodes",
    Base.metadata,
    Column("resource_id", Integer, ForeignKey("resource_ecs.id"), primary_key=True),
    Column("tree_node_id", Integer, ForeignKey("tree_nodes.id"), primary_key=True),
)

resource_elb_bind_nodes = Table(
    "resource_elb_bind_nodes",
    Base.metadata,
    Column("resource_id", Integer, ForeignKey("resource_elb.id"), primary_key=True),
    Column("tree_node_id", Integer, ForeignKey("tree_nodes.id"), primary_key=True),
)

resource_rds_bind_nodes = Table(
    "resource_rds_bind_nodes",
    Base.metadata,
    Column("resource_id", Integer, ForeignKey("resource_rds.id"), primary_key=True),
    Column("tree_node_id", Integer, ForeignKey("tree_nodes.id"), primary_key=True),
)

from .sqlalchemy_tree_node_repository import SqlalchemyTreeNodeRepository
from .sqlalchemy_resource_repository import (
    SqlalchemyResourceRepository,
    SqlalchemyEcsRepository,
    SqlalchemyElbRepository,
    SqlalchemyRdsRepository,
)
from .sqlalchemy_user_repository import SqlalchemyUserRepository

__all__ = [
    "SqlalchemyTreeNodeRepository",
    "SqlalchemyResourceRepository",
    "SqlalchemyEcsRepository",
    "SqlalchemyElbRepository",
    "SqlalchemyRdsRepository",
    "SqlalchemyUserRepository",
]

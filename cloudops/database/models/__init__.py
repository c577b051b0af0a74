from .association import (
    tree_node_ops_admins,
    tree_node_rd_admins,
    tree_node_rd_members,
    resource_ecs_bind_nodes,
    resource_elb_bind_nodes,
    resource_rds_bind_nodes,
)
from .user import User
from .tree_node import TreeNode
from .resource import ResourceTreeMixin, ResourceEcs, ResourceElb, ResourceRds

__all__ = [
    "tree_node_ops_admins",
    "tree_node_rd_admins",
    "tree_node_rd_members",
    "resource_ecs_bind_nodes",
    "resource_elb_bind_nodes",
    "resource_rds_bind_nodes",
    "User",
    "TreeNode",
    "ResourceTreeMixin",
    "ResourceEcs",
    "ResourceElb",
    "ResourceRds",
]

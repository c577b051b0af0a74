from .tree_node import ITreeNodeRepository
from .resource import IResourceRepository
from .user import IUserRepository

__all__ = ["ITreeNodeRepository", "IResourceRepository", "IUserRepository"]

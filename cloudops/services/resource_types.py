# cloudops/services/resource_types.py
from typing import Dict

from cloudops.database import models
from cloudops.repositories.interfaces import IResourceRepository
from cloudops.services.exceptions import InvalidResourceTypeError

RESOURCE_TYPES = ("ecs", "elb", "rds")

RESOURCE_MODELS = {
    "ecs": models.ResourceEcs,
    "elb": models.ResourceElb,
    "rds": models.ResourceRds,
}


def get_resource_repo(resource_repos: Dict[str, IResourceRepository], resource_type: str) -> IResourceRepository:
    """리소스 종류에 해당하는 리포지토리를 반환합니다."""
    if resource_type not in RESOURCE_TYPES or resource_type not in resource_repos:
        raise InvalidResourceTypeError(f"Unsupported resource type '{resource_type}'. Expected one of {', '.join(RESOURCE_TYPES)}.")
    return resource_repos[resource_type]

import hashlib
import logging
from typing import Dict, Any, List

from cloudops.repositories.interfaces import ITreeNodeRepository, IResourceRepository
from cloudops.services.exceptions import TreeNodeNotFoundError, ResourceNotFoundError, ResourceBoundError
from cloudops.services.resource_types import RESOURCE_MODELS, get_resource_repo
from cloudops.utils.serializers import resource_to_dict

logger = logging.getLogger(__name__)

# 생성/수정 요청에서 직접 지정할 수 없는 컬럼
_PROTECTED_FIELDS = {"id", "hash", "created_at", "updated_at"}


def generate_resource_hash(instance_name: str, ip_addr: str) -> str:
    """인스턴스 이름과 IP 주소로 리소스 지문(SHA-256, hex 64자)을 생성합니다."""
    data = f"{instance_name}-{ip_addr}"
    return hashlib.sha256(data.encode('utf-8')).hexdigest()


class ResourceService:
    """ECS/ELB/RDS 리소스의 CRUD와 트리 노드 바인딩을 관리합니다."""

    def __init__(self, node_repo: ITreeNodeRepository, resource_repos: Dict[str, IResourceRepository]):
        """
        ResourceService를 초기화합니다.

        Args:
            node_repo: 바인딩 대상 트리 노드 조회용 리포지토리.
            resource_repos: 리소스 종류('ecs', 'elb', 'rds')별 리포지토리.
        """
        self.node_repo = node_repo
        self.resource_repos = resource_repos

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def list_resources(self, resource_type: str) -> List[Dict[str, Any]]:
        """해당 종류의 모든 리소스를 조회합니다."""
        repo = get_resource_repo(self.resource_repos, resource_type)
        return [resource_to_dict(r, resource_type) for r in repo.list_all()]

    def list_unbound_resources(self, resource_type: str) -> List[Dict[str, Any]]:
        """어느 트리 노드에도 바인딩되지 않은 리소스를 조회합니다."""
        repo = get_resource_repo(self.resource_repos, resource_type)
        return [resource_to_dict(r, resource_type) for r in repo.list_all() if len(r.bind_nodes) == 0]

    # ------------------------------------------------------------------
    # 생성 / 수정 / 삭제
    # ------------------------------------------------------------------
    def create_resource(self, resource_type: str, **fields) -> Dict[str, Any]:
        """
        새로운 리소스를 생성합니다. 생성 시점에 hash를 계산하여 함께 저장합니다.

        Args:
            resource_type: 'ecs', 'elb', 'rds' 중 하나.
            **fields: 리소스 컬럼 값. instance_name은 필수입니다.

        Returns:
            생성된 리소스의 dict 뷰.

        Raises:
            InvalidResourceTypeError: 지원하지 않는 리소스 종류일 때.
            ValueError: 알 수 없는 필드가 있거나 instance_name이 없을 때.
        """
        repo = get_resource_repo(self.resource_repos, resource_type)
        model = RESOURCE_MODELS[resource_type]
        self._validate_fields(model, resource_type, fields)
        if not fields.get("instance_name"):
            raise ValueError("'instance_name' is required.")

        resource = model(**fields)
        resource.hash = generate_resource_hash(fields["instance_name"], fields.get("ip_addr", ""))
        created = repo.create(resource)
        logger.info("%s resource %s created (hash=%s)", resource_type, created.id, created.hash)
        return resource_to_dict(created, resource_type)

    def update_resource(self, resource_type: str, resource_id: int, **fields) -> Dict[str, Any]:
        """
        리소스 정보를 수정합니다. hash는 생성 시점의 지문이므로 다시 계산하지 않습니다.

        Raises:
            ResourceNotFoundError: 해당 ID의 리소스를 찾을 수 없을 때.
            ValueError: 알 수 없는 필드가 있을 때.
        """
        repo = get_resource_repo(self.resource_repos, resource_type)
        self._validate_fields(RESOURCE_MODELS[resource_type], resource_type, fields)

        resource = repo.find_by_id(resource_id)
        if not resource:
            raise ResourceNotFoundError(f"{resource_type} resource with id '{resource_id}' not found.")

        for key, value in fields.items():
            setattr(resource, key, value)
        updated = repo.update(resource)
        return resource_to_dict(updated, resource_type)

    def delete_resource(self, resource_type: str, resource_id: int) -> bool:
        """
        리소스를 삭제합니다. 바인딩을 자동으로 해제하지 않습니다.

        Raises:
            ResourceNotFoundError: 해당 ID의 리소스를 찾을 수 없을 때.
            ResourceBoundError: 리소스가 하나 이상의 트리 노드에 바인딩되어 있을 때.
        """
        repo = get_resource_repo(self.resource_repos, resource_type)
        resource = repo.find_by_id(resource_id)
        if not resource:
            logger.warning("delete_resource: %s resource %s not found", resource_type, resource_id)
            raise ResourceNotFoundError(f"{resource_type} resource with id '{resource_id}' not found.")

        if len(resource.bind_nodes) > 0:
            node_ids = [node.id for node in resource.bind_nodes]
            logger.warning("delete_resource: %s resource %s is bound to nodes %s", resource_type, resource_id, node_ids)
            raise ResourceBoundError(f"{resource_type} resource '{resource_id}' is bound to tree nodes {node_ids} and cannot be deleted.")

        repo.delete(resource)
        logger.info("%s resource %s deleted", resource_type, resource_id)
        return True

    @staticmethod
    def _validate_fields(model, resource_type: str, fields: Dict[str, Any]):
        allowed = set(model.__table__.columns.keys()) - _PROTECTED_FIELDS
        unknown = sorted(set(fields) - allowed)
        if unknown:
            raise ValueError(f"Unknown field(s) for {resource_type} resource: {', '.join(unknown)}")

    # ------------------------------------------------------------------
    # 바인딩
    # ------------------------------------------------------------------
    def bind_resource(self, resource_type: str, resource_id: int, node_id: int) -> bool:
        """
        리소스를 트리 노드에 바인딩합니다. 이미 바인딩되어 있으면 아무것도 하지 않습니다.

        Returns:
            새로 바인딩했으면 True, 이미 바인딩되어 있었으면 False.

        Raises:
            ResourceNotFoundError: 리소스를 찾을 수 없을 때.
            TreeNodeNotFoundError: 트리 노드를 찾을 수 없을 때.
        """
        repo, resource, node = self._resolve_pair(resource_type, resource_id, node_id)
        created = repo.add_bind_node(resource, node)
        logger.info("bind %s %s -> node %s (%s)", resource_type, resource_id, node_id, "created" if created else "already bound")
        return created

    def unbind_resource(self, resource_type: str, resource_id: int, node_id: int) -> bool:
        """
        리소스와 트리 노드의 바인딩을 해제합니다. 바인딩이 없으면 아무것도 하지 않습니다.

        Returns:
            바인딩을 해제했으면 True, 원래 바인딩이 없었으면 False.

        Raises:
            ResourceNotFoundError: 리소스를 찾을 수 없을 때.
            TreeNodeNotFoundError: 트리 노드를 찾을 수 없을 때.
        """
        repo, resource, node = self._resolve_pair(resource_type, resource_id, node_id)
        removed = repo.remove_bind_node(resource, node)
        logger.info("unbind %s %s -> node %s (%s)", resource_type, resource_id, node_id, "removed" if removed else "not bound")
        return removed

    def bind_resources(self, resource_type: str, resource_ids: List[int], node_id: int) -> List[int]:
        """
        여러 리소스를 한 노드에 바인딩합니다.
        모든 리소스와 노드를 먼저 조회하므로, 하나라도 없으면 어떤 바인딩도 저장하지 않습니다.

        Returns:
            새로 바인딩된 리소스 ID 목록.
        """
        repo, node, resources = self._resolve_batch(resource_type, resource_ids, node_id)
        created = [resource.id for resource in resources if repo.add_bind_node(resource, node)]
        logger.info("bind %s %s -> node %s (created: %s)", resource_type, resource_ids, node_id, created)
        return created

    def unbind_resources(self, resource_type: str, resource_ids: List[int], node_id: int) -> List[int]:
        """
        여러 리소스의 바인딩을 한 번에 해제합니다. 조회 규칙은 bind_resources와 같습니다.

        Returns:
            바인딩이 해제된 리소스 ID 목록.
        """
        repo, node, resources = self._resolve_batch(resource_type, resource_ids, node_id)
        removed = [resource.id for resource in resources if repo.remove_bind_node(resource, node)]
        logger.info("unbind %s %s -> node %s (removed: %s)", resource_type, resource_ids, node_id, removed)
        return removed

    def _resolve_batch(self, resource_type: str, resource_ids: List[int], node_id: int):
        repo = get_resource_repo(self.resource_repos, resource_type)
        node = self.node_repo.find_by_id_no_preload(node_id)
        if not node:
            raise TreeNodeNotFoundError(f"Tree node with id '{node_id}' not found.")

        resources = []
        for resource_id in dict.fromkeys(resource_ids):
            resource = repo.find_by_id_no_preload(resource_id)
            if not resource:
                logger.warning("bind batch: %s resource %s not found, nothing applied", resource_type, resource_id)
                raise ResourceNotFoundError(f"{resource_type} resource with id '{resource_id}' not found.")
            resources.append(resource)
        return repo, node, resources

    def _resolve_pair(self, resource_type: str, resource_id: int, node_id: int):
        # 바인딩에는 연관 정보가 필요 없으므로 preload 없이 조회
        repo = get_resource_repo(self.resource_repos, resource_type)
        resource = repo.find_by_id_no_preload(resource_id)
        if not resource:
            raise ResourceNotFoundError(f"{resource_type} resource with id '{resource_id}' not found.")

        node = self.node_repo.find_by_id_no_preload(node_id)
        if not node:
            raise TreeNodeNotFoundError(f"Tree node with id '{node_id}' not found.")
        return repo, resource, node

    def bind_ecs(self, ecs_id: int, node_id: int) -> bool:
        return self.bind_resource("ecs", ecs_id, node_id)

    def bind_elb(self, elb_id: int, node_id: int) -> bool:
        return self.bind_resource("elb", elb_id, node_id)

    def bind_rds(self, rds_id: int, node_id: int) -> bool:
        return self.bind_resource("rds", rds_id, node_id)

    def unbind_ecs(self, ecs_id: int, node_id: int) -> bool:
        return self.unbind_resource("ecs", ecs_id, node_id)

    def unbind_elb(self, elb_id: int, node_id: int) -> bool:
        return self.unbind_resource("elb", elb_id, node_id)

    def unbind_rds(self, rds_id: int, node_id: int) -> bool:
        return self.unbind_resource("rds", rds_id, node_id)

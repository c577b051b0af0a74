import logging
from typing import Dict, Any, List, Iterable

from cloudops.database import models
from cloudops.repositories.interfaces import (
    ITreeNodeRepository, IUserRepository, IResourceRepository
)
from cloudops.services.exceptions import (
    TreeNodeNotFoundError, UserNotFoundError, LevelExceededError,
    ParentIsLeafError, NodeHasChildrenError, NodeHasBoundResourcesError
)
from cloudops.services.resource_types import get_resource_repo
from cloudops.utils.tree_builder import build_forest, filter_by_level
from cloudops.utils.descendant_resolver import collect_leaf_ids
from cloudops.utils.pagination import paginate
from cloudops.utils.serializers import tree_node_to_dict, resource_to_dict

logger = logging.getLogger(__name__)


class TreeService:
    """서비스 트리 노드의 조회/생성/삭제/수정과 서브트리 범위의 리소스 조회를 제공합니다."""

    def __init__(self, node_repo: ITreeNodeRepository, user_repo: IUserRepository, resource_repos: Dict[str, IResourceRepository]):
        """
        TreeService를 초기화합니다.

        Args:
            node_repo: 트리 노드 데이터에 접근하기 위한 리포지토리.
            user_repo: 노드 담당자(사용자) 조회용 리포지토리.
            resource_repos: 리소스 종류('ecs', 'elb', 'rds')별 리포지토리.
                (노드 삭제 시 바인딩 검증, 서브트리 리소스 조회에 사용)
        """
        self.node_repo = node_repo
        self.user_repo = user_repo
        self.resource_repos = resource_repos

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def list_tree_nodes(self) -> List[Dict[str, Any]]:
        """
        모든 노드를 읽어 트리 구조로 조립합니다.

        Returns:
            최상위 노드 dict의 리스트. 각 노드의 'children'에 직계 자식이 들어 있습니다.
        """
        nodes = self.node_repo.list_all()
        return build_forest([tree_node_to_dict(node) for node in nodes])

    def select_tree_nodes(self, level: int = 0, level_lt: int = 0) -> List[Dict[str, Any]]:
        """
        계층 조건으로 노드를 조회합니다. 각 노드의 'value'에는 노드 ID가 들어갑니다.
        선택 목록용 조회이므로 담당자 정보는 로드하지도, 포함하지도 않습니다.

        Args:
            level: 정확히 일치해야 하는 계층. 0이면 조건 없음.
            level_lt: 최대 계층(포함). 0이면 조건 없음.
        """
        nodes = self.node_repo.list_all_no_preload()
        views = []
        for node in filter_by_level(nodes, level, level_lt):
            view = tree_node_to_dict(node, with_users=False)
            view["value"] = node.id
            views.append(view)
        return views

    def get_top_tree_nodes(self) -> List[Dict[str, Any]]:
        """최상위(level 1) 노드 목록을 조회합니다."""
        return [tree_node_to_dict(node) for node in self.node_repo.list_by_level(1)]

    def list_leaf_tree_nodes(self) -> List[Dict[str, Any]]:
        """리프 노드 목록을 조회합니다."""
        return [tree_node_to_dict(node) for node in self.node_repo.list_leaves()]

    def get_children_tree_nodes(self, pid: int) -> List[Dict[str, Any]]:
        """특정 노드의 직계 자식 노드 목록을 조회합니다."""
        return [tree_node_to_dict(node) for node in self.node_repo.list_by_pid(pid)]

    # ------------------------------------------------------------------
    # 생성 / 삭제 / 수정
    # ------------------------------------------------------------------
    def create_tree_node(self, title: str, pid: int = 0, level: int = 1, is_leaf: int = 0, desc: str = "") -> Dict[str, Any]:
        """
        새로운 트리 노드를 생성합니다.

        최상위 노드(pid 0, level 1)는 항상 생성할 수 있습니다. 그 외에는 부모 노드가
        존재해야 하고, 계층이 부모 계층 + 1 을 넘지 않아야 하며, 부모가 리프가 아니어야 합니다.

        Returns:
            생성된 노드의 dict 뷰.

        Raises:
            TreeNodeNotFoundError: 부모 노드를 찾을 수 없을 때.
            LevelExceededError: level이 부모 계층 + 1 보다 깊을 때.
            ParentIsLeafError: 부모 노드가 리프 노드일 때.
        """
        if not (pid == 0 and level == 1):
            parent = self.node_repo.find_by_id(pid)
            if not parent:
                logger.warning("create_tree_node: parent node %s not found", pid)
                raise TreeNodeNotFoundError(f"Parent node with id '{pid}' not found.")

            if level > parent.level + 1:
                logger.warning("create_tree_node: level %s exceeds parent %s level %s + 1", level, pid, parent.level)
                raise LevelExceededError(f"Node level {level} exceeds the allowed depth under parent '{pid}' (level {parent.level}).")

            if parent.is_leaf == 1:
                logger.warning("create_tree_node: parent node %s is a leaf", pid)
                raise ParentIsLeafError(f"Parent node '{pid}' is a leaf node and cannot have children.")

        new_node = models.TreeNode(title=title, pid=pid, level=level, is_leaf=is_leaf, desc=desc)
        created_node = self.node_repo.create(new_node)
        logger.info("Tree node %s created under parent %s", created_node.id, pid)
        return tree_node_to_dict(created_node)

    def delete_tree_node(self, node_id: int) -> bool:
        """
        트리 노드를 삭제합니다. 하위 노드까지 연쇄 삭제하지 않습니다.

        Raises:
            TreeNodeNotFoundError: 해당 ID의 노드를 찾을 수 없을 때.
            NodeHasChildrenError: 자식 노드가 하나 이상 존재할 때.
            NodeHasBoundResourcesError: 노드에 바인딩된 리소스가 남아 있을 때.
        """
        node = self.node_repo.find_by_id(node_id)
        if not node:
            raise TreeNodeNotFoundError(f"Tree node with id '{node_id}' not found.")

        if self.node_repo.has_children(node_id):
            logger.warning("delete_tree_node: node %s has children", node_id)
            raise NodeHasChildrenError(f"Tree node '{node_id}' has children and cannot be deleted.")

        bound_counts = {}
        for resource_type, repo in self.resource_repos.items():
            count = repo.count_by_node_id(node_id)
            if count:
                bound_counts[resource_type] = count
        if bound_counts:
            summary = ", ".join(f"{t}={c}" for t, c in bound_counts.items())
            logger.warning("delete_tree_node: node %s still has bound resources (%s)", node_id, summary)
            raise NodeHasBoundResourcesError(f"Tree node '{node_id}' has bound resources ({summary}) and cannot be deleted.")

        self.node_repo.delete(node)
        logger.info("Tree node %s deleted", node_id)
        return True

    def update_tree_node(
        self,
        node_id: int,
        title: str,
        desc: str = "",
        is_leaf: int = 0,
        ops_admin_users: Iterable[str] = (),
        rd_admin_users: Iterable[str] = (),
        rd_member_users: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """
        노드 정보와 담당자 목록을 갱신합니다.

        담당자는 사용자 이름으로 전달되며, 모든 이름이 조회된 뒤에만 노드를 변경합니다.
        하나라도 조회되지 않으면 아무것도 저장하지 않고 실패합니다.
        pid와 level은 트리 구조를 결정하므로 수정 대상이 아닙니다.

        Raises:
            TreeNodeNotFoundError: 해당 ID의 노드를 찾을 수 없을 때.
            NodeHasChildrenError: 자식이 있는 노드를 리프로 바꾸려고 할 때.
            UserNotFoundError: 담당자 사용자 이름을 찾을 수 없을 때.
        """
        node = self.node_repo.find_by_id(node_id)
        if not node:
            raise TreeNodeNotFoundError(f"Tree node with id '{node_id}' not found.")

        if is_leaf == 1 and self.node_repo.has_children(node_id):
            logger.warning("update_tree_node: node %s has children, cannot mark as leaf", node_id)
            raise NodeHasChildrenError(f"Tree node '{node_id}' has children and cannot be marked as a leaf.")

        ops_admins = self._fetch_users(ops_admin_users, "OpsAdmin")
        rd_admins = self._fetch_users(rd_admin_users, "RdAdmin")
        rd_members = self._fetch_users(rd_member_users, "RdMember")

        node.title = title
        node.desc = desc
        node.is_leaf = is_leaf
        node.ops_admins = ops_admins
        node.rd_admins = rd_admins
        node.rd_members = rd_members

        updated_node = self.node_repo.update(node)
        return tree_node_to_dict(updated_node)

    def _fetch_users(self, usernames: Iterable[str], role: str) -> List[models.User]:
        users = []
        for username in usernames:
            user = self.user_repo.find_by_username(username)
            if not user:
                logger.warning("update_tree_node: %s user '%s' not found", role, username)
                raise UserNotFoundError(f"{role} user '{username}' not found.")
            users.append(user)
        return users

    # ------------------------------------------------------------------
    # 서브트리 범위 리소스 조회
    # ------------------------------------------------------------------
    def get_all_resources_by_type(self, node_id: int, resource_type: str, page: int, size: int) -> List[Dict[str, Any]]:
        """
        node_id 아래 모든 리프 노드에 바인딩된 특정 종류의 리소스를 페이지 단위로 조회합니다.

        리프 ID 집합을 계산한 뒤, 해당 종류의 전체 리소스 중 바인딩된 노드가 집합과
        하나라도 겹치는 리소스만 입력 순서대로 모아 페이지를 자릅니다.

        Args:
            node_id: 서브트리 루트 노드의 ID.
            resource_type: 'ecs', 'elb', 'rds' 중 하나.
            page: 1부터 시작하는 페이지 번호. (호출 측에서 검증)
            size: 페이지 크기. (호출 측에서 검증)

        Returns:
            리소스 dict의 리스트. 범위를 벗어난 페이지는 빈 리스트입니다.

        Raises:
            InvalidResourceTypeError: 지원하지 않는 리소스 종류일 때.
        """
        repo = get_resource_repo(self.resource_repos, resource_type)
        leaf_ids = collect_leaf_ids(self.node_repo.list_all_no_preload(), node_id)

        matched = [
            resource for resource in repo.list_all()
            if any(node.id in leaf_ids for node in resource.bind_nodes)
        ]
        return [resource_to_dict(resource, resource_type) for resource in paginate(matched, page, size)]

# tests/services/test_tree_service.py
import pytest
from unittest.mock import MagicMock, ANY

from cloudops.services.tree_service import TreeService
from cloudops.services.exceptions import *
from cloudops.repositories.interfaces import ITreeNodeRepository, IUserRepository, IResourceRepository
from cloudops.database import models

# ===================================================================
#  Fixture 설정
# ===================================================================

@pytest.fixture
def mock_node_repo() -> MagicMock:
    """ITreeNodeRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=ITreeNodeRepository)

@pytest.fixture
def mock_user_repo() -> MagicMock:
    """IUserRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IUserRepository)

@pytest.fixture
def mock_resource_repos() -> dict:
    """리소스 종류별 IResourceRepository 모의 객체. 기본적으로 바인딩된 리소스는 없습니다."""
    repos = {}
    for resource_type in ("ecs", "elb", "rds"):
        repo = MagicMock(spec=IResourceRepository)
        repo.count_by_node_id.return_value = 0
        repo.list_all.return_value = []
        repos[resource_type] = repo
    return repos

@pytest.fixture
def tree_service(mock_node_repo: MagicMock, mock_user_repo: MagicMock, mock_resource_repos: dict) -> TreeService:
    """테스트에 사용될 TreeService 인스턴스를 생성하고, 의존성을 주입합니다."""
    return TreeService(mock_node_repo, mock_user_repo, mock_resource_repos)

@pytest.fixture
def sample_nodes():
    """루트 1(non-leaf) 아래 리프 2, 3"""
    return [
        models.TreeNode(id=1, title="root", pid=0, level=1, is_leaf=0, desc=""),
        models.TreeNode(id=2, title="team-a", pid=1, level=2, is_leaf=1, desc=""),
        models.TreeNode(id=3, title="team-b", pid=1, level=2, is_leaf=1, desc=""),
    ]

# ===================================================================
#  조회(Listing) 테스트
# ===================================================================
class TestListing:
    def test_list_tree_nodes_builds_tree(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        """평면 노드 목록이 루트 [1], 자식 [2, 3] 구조로 조립되는지 테스트합니다."""
        # === Arrange ===
        mock_node_repo.list_all.return_value = sample_nodes

        # === Act ===
        roots = tree_service.list_tree_nodes()

        # === Assert ===
        assert [r["id"] for r in roots] == [1]
        assert roots[0]["key"] == "1"
        assert [c["id"] for c in roots[0]["children"]] == [2, 3]
        # 파생 필드는 모델에 저장되지 않아야 함
        assert not hasattr(sample_nodes[0], "children")

    def test_list_tree_nodes_empty(self, tree_service: TreeService, mock_node_repo: MagicMock):
        mock_node_repo.list_all.return_value = []
        assert tree_service.list_tree_nodes() == []

    def test_select_tree_nodes_filters_and_sets_value(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        mock_node_repo.list_all_no_preload.return_value = sample_nodes

        nodes = tree_service.select_tree_nodes(level=2)

        assert [n["id"] for n in nodes] == [2, 3]
        assert [n["value"] for n in nodes] == [2, 3]
        # 선택 목록에는 담당자 정보가 필요 없음
        assert "ops_admins" not in nodes[0]
        mock_node_repo.list_all.assert_not_called()

    def test_get_top_tree_nodes_queries_level_one(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        mock_node_repo.list_by_level.return_value = sample_nodes[:1]

        nodes = tree_service.get_top_tree_nodes()

        assert [n["id"] for n in nodes] == [1]
        mock_node_repo.list_by_level.assert_called_once_with(1)

    def test_list_leaf_tree_nodes(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        mock_node_repo.list_leaves.return_value = sample_nodes[1:]
        assert [n["id"] for n in tree_service.list_leaf_tree_nodes()] == [2, 3]

    def test_get_children_tree_nodes(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        mock_node_repo.list_by_pid.return_value = sample_nodes[1:]

        nodes = tree_service.get_children_tree_nodes(1)

        assert [n["id"] for n in nodes] == [2, 3]
        mock_node_repo.list_by_pid.assert_called_once_with(1)

# ===================================================================
#  노드 생성(Create) 테스트
# ===================================================================
class TestCreateTreeNode:
    def test_create_root_node_always_allowed(self, tree_service: TreeService, mock_node_repo: MagicMock):
        """최상위 노드(pid 0, level 1)는 부모 조회 없이 생성되는지 테스트합니다."""
        # === Arrange ===
        mock_node_repo.create.side_effect = lambda node: node

        # === Act ===
        node = tree_service.create_tree_node("root", pid=0, level=1)

        # === Assert ===
        assert node["title"] == "root"
        mock_node_repo.find_by_id.assert_not_called()
        mock_node_repo.create.assert_called_once_with(ANY)

    def test_create_child_node_success(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        # === Arrange ===
        # 시나리오: 부모(1, level 1, non-leaf)가 존재함
        mock_node_repo.find_by_id.return_value = sample_nodes[0]
        mock_node_repo.create.side_effect = lambda node: node

        # === Act ===
        node = tree_service.create_tree_node("team-c", pid=1, level=2, is_leaf=1)

        # === Assert ===
        assert node["pid"] == 1
        assert node["level"] == 2
        assert node["is_leaf"] == 1
        mock_node_repo.find_by_id.assert_called_once_with(1)

    def test_create_fails_if_parent_not_found(self, tree_service: TreeService, mock_node_repo: MagicMock):
        mock_node_repo.find_by_id.return_value = None

        with pytest.raises(TreeNodeNotFoundError):
            tree_service.create_tree_node("orphan", pid=42, level=2)
        mock_node_repo.create.assert_not_called()

    def test_create_fails_if_level_exceeded(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        """부모 level + 1 보다 깊은 노드는 LevelExceededError가 발생해야 합니다."""
        mock_node_repo.find_by_id.return_value = sample_nodes[0]

        with pytest.raises(LevelExceededError):
            tree_service.create_tree_node("too-deep", pid=1, level=3)
        mock_node_repo.create.assert_not_called()

    def test_create_fails_if_parent_is_leaf(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        mock_node_repo.find_by_id.return_value = sample_nodes[1]

        with pytest.raises(ParentIsLeafError):
            tree_service.create_tree_node("under-leaf", pid=2, level=3)
        mock_node_repo.create.assert_not_called()

    def test_invariant_errors_share_a_kind(self):
        assert issubclass(LevelExceededError, InvariantViolationError)
        assert issubclass(ParentIsLeafError, InvariantViolationError)

# ===================================================================
#  노드 삭제(Delete) 테스트
# ===================================================================
class TestDeleteTreeNode:
    def test_delete_childless_node_success(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        # === Arrange ===
        node = sample_nodes[2]
        mock_node_repo.find_by_id.return_value = node
        mock_node_repo.has_children.return_value = False

        # === Act ===
        result = tree_service.delete_tree_node(3)

        # === Assert ===
        assert result is True
        mock_node_repo.has_children.assert_called_once_with(3)
        mock_node_repo.delete.assert_called_once_with(node)

    def test_delete_fails_if_not_found(self, tree_service: TreeService, mock_node_repo: MagicMock):
        mock_node_repo.find_by_id.return_value = None

        with pytest.raises(TreeNodeNotFoundError):
            tree_service.delete_tree_node(99)
        mock_node_repo.delete.assert_not_called()

    def test_delete_fails_if_node_has_children(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        """자식이 있는 노드는 연쇄 삭제하지 않고 NodeHasChildrenError가 발생해야 합니다."""
        mock_node_repo.find_by_id.return_value = sample_nodes[0]
        mock_node_repo.has_children.return_value = True

        with pytest.raises(NodeHasChildrenError):
            tree_service.delete_tree_node(1)
        mock_node_repo.delete.assert_not_called()

    def test_delete_fails_if_resources_are_bound(self, tree_service: TreeService, mock_node_repo: MagicMock, mock_resource_repos: dict, sample_nodes):
        # === Arrange ===
        # 시나리오: 자식은 없지만 RDS 1개가 바인딩되어 있음
        mock_node_repo.find_by_id.return_value = sample_nodes[1]
        mock_node_repo.has_children.return_value = False
        mock_resource_repos["rds"].count_by_node_id.return_value = 1

        # === Act & Assert ===
        with pytest.raises(NodeHasBoundResourcesError, match="rds=1"):
            tree_service.delete_tree_node(2)
        mock_node_repo.delete.assert_not_called()

# ===================================================================
#  노드 수정(Update) 테스트
# ===================================================================
class TestUpdateTreeNode:
    def test_update_resolves_users_and_persists(self, tree_service: TreeService, mock_node_repo: MagicMock, mock_user_repo: MagicMock, sample_nodes):
        # === Arrange ===
        node = sample_nodes[1]
        mock_node_repo.find_by_id.return_value = node
        mock_node_repo.has_children.return_value = False
        mock_node_repo.update.side_effect = lambda n: n
        users = {
            "alice": models.User(id=1, username="alice"),
            "bob": models.User(id=2, username="bob"),
        }
        mock_user_repo.find_by_username.side_effect = users.get

        # === Act ===
        result = tree_service.update_tree_node(
            2, "team-a-renamed", desc="payments", is_leaf=1,
            ops_admin_users=["alice"], rd_admin_users=["bob"], rd_member_users=["alice", "bob"],
        )

        # === Assert ===
        assert result["title"] == "team-a-renamed"
        assert result["ops_admins"] == ["alice"]
        assert result["rd_admins"] == ["bob"]
        assert result["rd_members"] == ["alice", "bob"]
        mock_node_repo.update.assert_called_once_with(node)

    def test_update_aborts_if_any_user_missing(self, tree_service: TreeService, mock_node_repo: MagicMock, mock_user_repo: MagicMock, sample_nodes):
        """담당자 중 한 명이라도 없으면 노드를 전혀 변경하지 않아야 합니다."""
        # === Arrange ===
        node = sample_nodes[1]
        mock_node_repo.find_by_id.return_value = node
        mock_node_repo.has_children.return_value = False
        mock_user_repo.find_by_username.side_effect = {"alice": models.User(id=1, username="alice")}.get

        # === Act & Assert ===
        with pytest.raises(UserNotFoundError, match="ghost"):
            tree_service.update_tree_node(2, "renamed", ops_admin_users=["alice"], rd_member_users=["ghost"])

        assert node.title == "team-a"
        assert node.ops_admins == []
        mock_node_repo.update.assert_not_called()

    def test_update_fails_if_not_found(self, tree_service: TreeService, mock_node_repo: MagicMock):
        mock_node_repo.find_by_id.return_value = None

        with pytest.raises(TreeNodeNotFoundError):
            tree_service.update_tree_node(99, "missing")

    def test_update_cannot_mark_parent_as_leaf(self, tree_service: TreeService, mock_node_repo: MagicMock, sample_nodes):
        mock_node_repo.find_by_id.return_value = sample_nodes[0]
        mock_node_repo.has_children.return_value = True

        with pytest.raises(NodeHasChildrenError):
            tree_service.update_tree_node(1, "root", is_leaf=1)
        mock_node_repo.update.assert_not_called()

# ===================================================================
#  서브트리 범위 리소스 조회 테스트
# ===================================================================
class TestGetAllResourcesByType:
    @pytest.fixture
    def bound_ecs(self, sample_nodes):
        """E1은 노드 2에만, E2는 어디에도 바인딩되지 않음"""
        e1 = models.ResourceEcs(id=10, instance_name="E1", bind_nodes=[sample_nodes[1]])
        e2 = models.ResourceEcs(id=11, instance_name="E2", bind_nodes=[])
        return [e1, e2]

    @pytest.mark.parametrize("root_id,expected", [(1, ["E1"]), (2, ["E1"]), (3, []), (404, [])])
    def test_scoped_by_subtree(self, tree_service, mock_node_repo, mock_resource_repos, sample_nodes, bound_ecs, root_id, expected):
        # === Arrange ===
        mock_node_repo.list_all_no_preload.return_value = sample_nodes
        mock_resource_repos["ecs"].list_all.return_value = bound_ecs

        # === Act ===
        resources = tree_service.get_all_resources_by_type(root_id, "ecs", 1, 10)

        # === Assert ===
        assert [r["instance_name"] for r in resources] == expected
        mock_resource_repos["elb"].list_all.assert_not_called()

    def test_resource_view_contains_type_and_bindings(self, tree_service, mock_node_repo, mock_resource_repos, sample_nodes, bound_ecs):
        mock_node_repo.list_all_no_preload.return_value = sample_nodes
        mock_resource_repos["ecs"].list_all.return_value = bound_ecs

        resource = tree_service.get_all_resources_by_type(1, "ecs", 1, 10)[0]

        assert resource["type"] == "ecs"
        assert resource["bind_nodes"] == [2]

    def test_pages_are_stable(self, tree_service, mock_node_repo, mock_resource_repos, sample_nodes):
        """size=k 로 모든 페이지를 이어 붙이면 전체 결과가 정확히 한 번씩 나와야 합니다."""
        # === Arrange ===
        mock_node_repo.list_all_no_preload.return_value = sample_nodes
        resources = [
            models.ResourceElb(id=i, instance_name=f"lb-{i}", bind_nodes=[sample_nodes[1 + i % 2]])
            for i in range(7)
        ]
        mock_resource_repos["elb"].list_all.return_value = resources

        # === Act ===
        collected = []
        for page in range(1, 4):
            collected.extend(r["id"] for r in tree_service.get_all_resources_by_type(1, "elb", page, 3))

        # === Assert ===
        assert collected == list(range(7))
        assert tree_service.get_all_resources_by_type(1, "elb", 4, 3) == []

    def test_invalid_type_raises(self, tree_service):
        with pytest.raises(InvalidResourceTypeError):
            tree_service.get_all_resources_by_type(1, "vpc", 1, 10)

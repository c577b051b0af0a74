# cloudops/utils/descendant_resolver.py
from collections import defaultdict
from typing import Any, Iterable, Set


def collect_leaf_ids(nodes: Iterable[Any], root_id: int) -> Set[int]:
    """
    root_id를 루트로 하는 서브트리에서 도달 가능한 리프 노드 ID 집합을 계산합니다.

    평면 노드 목록으로 '부모 ID -> 자식' 인접 맵을 만든 뒤 깊이 우선 탐색합니다.
    리프 노드(is_leaf == 1)를 만나면 ID를 추가하고 더 내려가지 않습니다.
    루트 자체가 리프이면 루트 ID만 반환하고, 루트가 목록에 없으면 빈 집합을 반환합니다.

    데이터가 잘못되어 순환이 있더라도 이미 방문한 노드는 다시 방문하지 않습니다.

    Args:
        nodes: id, pid, is_leaf 속성을 가진 노드 목록.
        root_id: 서브트리 루트 노드의 ID.

    Returns:
        리프 노드 ID의 집합.
    """
    node_map = {}
    children_map = defaultdict(list)
    for node in nodes:
        node_map[node.id] = node
        children_map[node.pid].append(node.id)

    leaf_ids = set()
    if root_id not in node_map:
        return leaf_ids

    visited = set()
    stack = [root_id]
    while stack:
        node_id = stack.pop()
        if node_id in visited:
            continue
        visited.add(node_id)

        node = node_map[node_id]
        if node.is_leaf == 1:
            leaf_ids.add(node_id)
            continue

        stack.extend(children_map.get(node_id, []))

    return leaf_ids

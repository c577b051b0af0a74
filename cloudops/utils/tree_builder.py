# cloudops/utils/tree_builder.py
from collections import defaultdict
from typing import Any, Dict, Iterable, List


def build_forest(views: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    평면(flat) 노드 뷰 목록으로 트리(forest)를 구성합니다.

    첫 번째 순회에서 최상위 노드(pid == 0)와 '부모 ID -> 자식 목록' 매핑을 나누고,
    두 번째 순회에서 각 뷰의 'children'에 직계 자식을 붙입니다. 입력 순서가 유지됩니다.

    부모가 목록에 없거나 자기 자신을 부모로 가리키는 노드는 최상위 노드로 취급하여,
    모든 노드가 결과에 정확히 한 번 나타나도록 합니다.

    Args:
        views: 'id'와 'pid' 키를 가진 노드 dict 목록. (ORM 객체가 아닌 응답용 뷰)

    Returns:
        최상위 노드 뷰의 리스트. 각 뷰의 'children'이 채워진 상태입니다.
    """
    known_ids = {view["id"] for view in views}

    roots = []
    children_map = defaultdict(list)
    for view in views:
        pid = view["pid"]
        if pid == 0 or pid == view["id"] or pid not in known_ids:
            roots.append(view)
        else:
            children_map[pid].append(view)

    for view in views:
        view["children"] = children_map.get(view["id"], [])

    return roots


def filter_by_level(nodes: Iterable[Any], level: int = 0, level_lt: int = 0) -> List[Any]:
    """
    계층 조건으로 노드를 걸러냅니다. 두 조건 모두 0이면 적용하지 않습니다.

    Args:
        nodes: level 속성을 가진 노드 목록.
        level: 정확히 일치해야 하는 계층. 0이면 무시.
        level_lt: 허용되는 최대 계층(포함). 0이면 무시.
    """
    return [
        node for node in nodes
        if (level == 0 or node.level == level) and (level_lt == 0 or node.level <= level_lt)
    ]

# cloudops/utils/serializers.py
from datetime import datetime
from typing import Any, Dict


def _column_values(obj) -> Dict[str, Any]:
    data = {}
    for column in obj.__table__.columns:
        value = getattr(obj, column.key)
        data[column.key] = value.isoformat() if isinstance(value, datetime) else value
    return data


def tree_node_to_dict(node, with_users: bool = True) -> Dict[str, Any]:
    """
    트리 노드를 응답용 dict 뷰로 변환합니다.
    key(문자열 ID)는 화면 표시용 파생 값이며 모델에는 저장되지 않습니다.
    """
    data = _column_values(node)
    data["key"] = str(node.id)
    if with_users:
        data["ops_admins"] = [user.username for user in node.ops_admins]
        data["rd_admins"] = [user.username for user in node.rd_admins]
        data["rd_members"] = [user.username for user in node.rd_members]
    return data


def resource_to_dict(resource, resource_type: str) -> Dict[str, Any]:
    """리소스를 응답용 dict 뷰로 변환합니다. bind_nodes는 바인딩된 노드 ID 목록입니다."""
    data = _column_values(resource)
    data["type"] = resource_type
    data["bind_nodes"] = [node.id for node in resource.bind_nodes]
    return data

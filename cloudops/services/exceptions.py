# cloudops/services/exceptions.py

# --- Not Found ---
class NotFoundError(Exception):
    """조회 대상(노드, 리소스, 사용자)을 찾을 수 없을 때"""
    pass

class TreeNodeNotFoundError(NotFoundError):
    """트리 노드를 찾을 수 없을 때"""
    pass

class ResourceNotFoundError(NotFoundError):
    """ECS/ELB/RDS 리소스를 찾을 수 없을 때"""
    pass

class UserNotFoundError(NotFoundError):
    """사용자를 찾을 수 없을 때"""
    pass

# --- Invariant Violations ---
class InvariantViolationError(Exception):
    """트리/바인딩 불변 조건을 위반하는 요청일 때"""
    pass

class LevelExceededError(InvariantViolationError):
    """노드 계층이 부모 계층 + 1 을 초과할 때"""
    pass

class ParentIsLeafError(InvariantViolationError):
    """리프 노드 아래에 자식 노드를 만들려고 할 때"""
    pass

class NodeHasChildrenError(InvariantViolationError):
    """자식 노드가 있는 노드를 삭제하거나 리프로 바꾸려고 할 때"""
    pass

class NodeHasBoundResourcesError(InvariantViolationError):
    """리소스가 바인딩된 노드를 삭제하려고 할 때"""
    pass

class ResourceBoundError(InvariantViolationError):
    """트리 노드에 바인딩된 리소스를 삭제하려고 할 때"""
    pass

# --- Validation ---
class InvalidResourceTypeError(ValueError):
    """지원하지 않는 리소스 종류(ecs/elb/rds 이외)일 때"""
    pass

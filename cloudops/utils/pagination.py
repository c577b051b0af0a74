# cloudops/utils/pagination.py
from typing import List, Sequence, TypeVar

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, size: int) -> List[T]:
    """
    offset/limit 방식으로 한 페이지를 잘라 반환합니다.
    page, size는 호출 측에서 양의 정수로 검증되었다고 가정합니다.
    범위를 벗어난 페이지는 오류 대신 빈 리스트를 반환합니다.
    """
    offset = (page - 1) * size
    if offset >= len(items):
        return []
    end = min(offset + size, len(items))
    return list(items[offset:end])

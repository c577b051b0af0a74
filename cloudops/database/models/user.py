from sqlalchemy import Column, Integer, String
from ..database import Base

class User(Base):
    """
    트리 노드의 담당자(운영 관리자, 개발 관리자, 개발 멤버)로 지정될 수 있는 사용자입니다.
    인증/권한 모델은 이 서비스의 범위 밖이며, 여기서는 사용자 이름 조회만 사용합니다.
    """
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    real_name = Column(String, nullable=False, default="")

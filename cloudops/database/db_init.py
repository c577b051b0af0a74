import logging
from .database import engine, SessionLocal, Base
from .models import User, TreeNode

logger = logging.getLogger(__name__)

def initialize_db(bind=None, session_factory=None):
    """
    테이블을 생성하고, 비어 있는 DB에 기본 데이터(관리자 사용자, 최상위 노드)를 삽입합니다.
    실패하면 롤백한 뒤 예외를 그대로 전파합니다.
    """
    bind = bind or engine
    session_factory = session_factory or SessionLocal

    # 모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    Base.metadata.create_all(bind=bind)
    logger.info("Tables created.")

    db = session_factory()
    try:
        # 기본 데이터가 이미 있는지 확인
        if db.query(User).first():
            logger.info("Seed data already present, skipping.")
            return

        admin_user = User(username='admin', real_name='Administrator')
        db.add(admin_user)

        root_node = TreeNode(title='root', pid=0, level=1, is_leaf=0, desc='default service tree root')
        root_node.ops_admins = [admin_user]
        db.add(root_node)

        db.commit()
        logger.info("Seed data inserted.")

    except Exception:
        logger.exception("DB initialization failed, rolling back.")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == '__main__':
    from cloudops.config import setup_logging
    setup_logging()
    initialize_db()

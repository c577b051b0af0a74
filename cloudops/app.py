# cloudops/app.py
from wsgiref.simple_server import make_server
from urllib.parse import parse_qs
import json
import logging
import re
import sys

from cloudops.config import settings, setup_logging
from cloudops.database.database import SessionLocal
from cloudops.repositories.sqlalchemy import (
    SqlalchemyTreeNodeRepository,
    SqlalchemyUserRepository,
    SqlalchemyEcsRepository,
    SqlalchemyElbRepository,
    SqlalchemyRdsRepository,
)
from cloudops.services.tree_service import TreeService
from cloudops.services.resource_service import ResourceService
from cloudops.services.resource_types import RESOURCE_TYPES
from cloudops.services.exceptions import NotFoundError, InvariantViolationError

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        data = json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, json.JSONDecodeError):
        raise ValueError("Invalid or missing JSON body.")
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object.")
    return data

def get_query_params(environ):
    return {key: values[0] for key, values in parse_qs(environ.get("QUERY_STRING", "")).items()}

def parse_int(value, name, default=None, positive=False):
    if value is None or value == "":
        if default is None:
            raise ValueError(f"'{name}' is required.")
        return default
    # JSON의 true/false, 소수는 정수로 취급하지 않음
    if isinstance(value, (bool, float)):
        raise ValueError(f"'{name}' must be an integer.")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be an integer.")
    if positive and number <= 0:
        raise ValueError(f"'{name}' must be a positive integer.")
    return number

def handle_exception(e):
    if isinstance(e, NotFoundError):
        status = "404 Not Found"
    elif isinstance(e, (InvariantViolationError, ValueError)):
        status = "400 Bad Request"
    else:
        logger.exception("Unhandled error while processing request")
        status = "500 Internal Server Error"
    return status, json.dumps({"error": str(e)})

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

def application(environ, start_response):
    db_session = SessionLocal()
    try:
        # 1. 의존성 생성 (Repositories -> Services)
        node_repo = SqlalchemyTreeNodeRepository(db_session)
        user_repo = SqlalchemyUserRepository(db_session)
        resource_repos = {
            "ecs": SqlalchemyEcsRepository(db_session),
            "elb": SqlalchemyElbRepository(db_session),
            "rds": SqlalchemyRdsRepository(db_session),
        }

        # 2. 생성된 서비스 객체들을 environ을 통해 핸들러에 전달
        environ['services'] = {
            'tree': TreeService(node_repo, user_repo, resource_repos),
            'resource': ResourceService(node_repo, resource_repos),
        }

        # 3. 라우팅 및 핸들러 실행
        path = environ.get("PATH_INFO", "")
        method = environ.get("REQUEST_METHOD", "")

        handler, path_args = None, []
        for route_method, pattern, route_handler in ROUTES:
            if method == route_method and (match := re.match(pattern, path)):
                handler, path_args = route_handler, match.groups()
                break

        if handler:
            status, response_body = handler(environ, *path_args)
        else:
            status, response_body = '404 Not Found', json.dumps({'error': 'Not Found'})

    except Exception as e:
        db_session.rollback()
        status, response_body = handle_exception(e)
    finally:
        db_session.close()

    start_response(status, [("Content-Type", "application/json")])
    return [response_body.encode("utf-8")]

# --------------------------------------------------------------------------
## 트리 노드 핸들러
# --------------------------------------------------------------------------

def list_tree_node_handler(environ, *args):
    nodes = environ['services']['tree'].list_tree_nodes()
    return '200 OK', json.dumps({"data": nodes})

def select_tree_node_handler(environ, *args):
    params = get_query_params(environ)
    level = parse_int(params.get("level"), "level", default=0)
    level_lt = parse_int(params.get("levelLt"), "levelLt", default=0)
    nodes = environ['services']['tree'].select_tree_nodes(level, level_lt)
    return '200 OK', json.dumps({"data": nodes})

def get_top_tree_node_handler(environ, *args):
    nodes = environ['services']['tree'].get_top_tree_nodes()
    return '200 OK', json.dumps({"data": nodes})

def list_leaf_tree_node_handler(environ, *args):
    nodes = environ['services']['tree'].list_leaf_tree_nodes()
    return '200 OK', json.dumps({"data": nodes})

def get_children_tree_node_handler(environ, pid):
    nodes = environ['services']['tree'].get_children_tree_nodes(int(pid))
    return '200 OK', json.dumps({"data": nodes})

def create_tree_node_handler(environ, *args):
    data = get_request_data(environ)
    if not data.get("title"):
        raise ValueError("'title' is required.")
    node = environ['services']['tree'].create_tree_node(
        title=data["title"],
        pid=parse_int(data.get("pid"), "pid", default=0),
        level=parse_int(data.get("level"), "level", default=1, positive=True),
        is_leaf=1 if data.get("isLeaf") else 0,
        desc=data.get("desc", ""),
    )
    return '201 Created', json.dumps({"data": node})

def delete_tree_node_handler(environ, node_id):
    environ['services']['tree'].delete_tree_node(int(node_id))
    return '200 OK', json.dumps({"message": f"Tree node '{node_id}' deleted."})

def update_tree_node_handler(environ, *args):
    data = get_request_data(environ)
    if not data.get("title"):
        raise ValueError("'title' is required.")
    node = environ['services']['tree'].update_tree_node(
        node_id=parse_int(data.get("id"), "id"),
        title=data["title"],
        desc=data.get("desc", ""),
        is_leaf=1 if data.get("isLeaf") else 0,
        ops_admin_users=data.get("opsAdminUsers") or [],
        rd_admin_users=data.get("rdAdminUsers") or [],
        rd_member_users=data.get("rdMemberUsers") or [],
    )
    return '200 OK', json.dumps({"data": node})

# --------------------------------------------------------------------------
## 리소스 핸들러 (경로의 Ecs/Elb/Rds 는 리소스 종류로 변환)
# --------------------------------------------------------------------------

def list_resources_handler(environ, kind):
    resources = environ['services']['resource'].list_resources(kind.lower())
    return '200 OK', json.dumps({"data": resources})

def list_unbound_resources_handler(environ, kind):
    resources = environ['services']['resource'].list_unbound_resources(kind.lower())
    return '200 OK', json.dumps({"data": resources})

def get_all_resource_by_type_handler(environ, *args):
    params = get_query_params(environ)
    resource_type = params.get("type", "")
    if resource_type not in RESOURCE_TYPES:
        raise ValueError(f"'type' must be one of {', '.join(RESOURCE_TYPES)}.")
    node_id = parse_int(params.get("nid"), "nid")
    page = parse_int(params.get("page"), "page", default=1, positive=True)
    size = parse_int(params.get("size"), "size", default=settings.DEFAULT_PAGE_SIZE, positive=True)
    resources = environ['services']['tree'].get_all_resources_by_type(node_id, resource_type, page, size)
    return '200 OK', json.dumps({"data": resources})

def _bind_request(environ):
    data = get_request_data(environ)
    node_id = parse_int(data.get("nodeId"), "nodeId")
    resource_ids = data.get("resourceIds")
    if not isinstance(resource_ids, list) or not resource_ids:
        raise ValueError("'resourceIds' must be a non-empty list.")
    return node_id, [parse_int(rid, "resourceIds") for rid in resource_ids]

def bind_handler(environ, kind):
    node_id, resource_ids = _bind_request(environ)
    created = environ['services']['resource'].bind_resources(kind.lower(), resource_ids, node_id)
    return '200 OK', json.dumps({"nodeId": node_id, "bound": created})

def unbind_handler(environ, kind):
    node_id, resource_ids = _bind_request(environ)
    removed = environ['services']['resource'].unbind_resources(kind.lower(), resource_ids, node_id)
    return '200 OK', json.dumps({"nodeId": node_id, "unbound": removed})

def create_resource_handler(environ, kind):
    data = get_request_data(environ)
    resource = environ['services']['resource'].create_resource(kind.lower(), **data)
    return '201 Created', json.dumps({"data": resource})

def update_resource_handler(environ, kind):
    data = get_request_data(environ)
    resource_id = parse_int(data.pop("id", None), "id")
    resource = environ['services']['resource'].update_resource(kind.lower(), resource_id, **data)
    return '200 OK', json.dumps({"data": resource})

def delete_resource_handler(environ, kind, resource_id):
    environ['services']['resource'].delete_resource(kind.lower(), int(resource_id))
    return '200 OK', json.dumps({"message": f"{kind.lower()} resource '{resource_id}' deleted."})


KIND = r'(Ecs|Elb|Rds)'

ROUTES = [
    ('GET', r'^/api/tree/listTreeNode$', list_tree_node_handler),
    ('GET', r'^/api/tree/selectTreeNode$', select_tree_node_handler),
    ('GET', r'^/api/tree/getTopTreeNode$', get_top_tree_node_handler),
    ('GET', r'^/api/tree/listLeafTreeNode$', list_leaf_tree_node_handler),
    ('POST', r'^/api/tree/createTreeNode$', create_tree_node_handler),
    ('DELETE', r'^/api/tree/deleteTreeNode/([0-9]+)$', delete_tree_node_handler),
    ('GET', r'^/api/tree/getChildrenTreeNode/([0-9]+)$', get_children_tree_node_handler),
    ('POST', r'^/api/tree/updateTreeNode$', update_tree_node_handler),
    ('GET', rf'^/api/tree/get{KIND}UnbindList$', list_unbound_resources_handler),
    ('GET', rf'^/api/tree/get{KIND}List$', list_resources_handler),
    ('GET', r'^/api/tree/getAllResourceByType$', get_all_resource_by_type_handler),
    ('POST', rf'^/api/tree/bind{KIND}$', bind_handler),
    ('POST', rf'^/api/tree/unBind{KIND}$', unbind_handler),
    ('POST', rf'^/api/tree/create{KIND}Resource$', create_resource_handler),
    ('POST', rf'^/api/tree/update{KIND}Resource$', update_resource_handler),
    ('DELETE', rf'^/api/tree/delete{KIND}Resource/([0-9]+)$', delete_resource_handler),
]

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

if __name__ == "__main__":
    setup_logging()
    try:
        with make_server(settings.SERVER_HOST, settings.SERVER_PORT, application) as httpd:
            logger.info("Serving %s (%s) on port %s...", settings.APP_NAME, settings.APP_ENV, settings.SERVER_PORT)
            httpd.serve_forever()
    except Exception as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        sys.exit(1)

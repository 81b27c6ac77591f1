# vm_inventory/app.py
from wsgiref.simple_server import make_server
import json
import logging
import re
import sys

from vm_inventory import config
from vm_inventory.database.database import SessionLocal
from vm_inventory.database.db_init import initialize_db
from vm_inventory.repositories.sqlalchemy import (
    SqlalchemyCompanyRepository,
    SqlalchemyMachineRepository,
    SqlalchemyRoleRepository,
    SqlalchemyUserRepository,
)
from vm_inventory.services.identity_service import IdentityService
from vm_inventory.services.machine_service import MachineService, MachineAssignment
from vm_inventory.services.policy import RequestSession
from vm_inventory.services.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    TokenInvalidError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        data = json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, json.JSONDecodeError):
        raise ValidationError("Invalid or missing JSON body.")
    if not isinstance(data, dict):
        raise ValidationError("JSON body must be an object.")
    return data

def get_bearer_token(environ):
    auth_header = environ.get('HTTP_AUTHORIZATION', '')
    if auth_header.lower().startswith('bearer '):
        return auth_header[7:].strip() or None
    return environ.get('HTTP_X_AUTH_TOKEN') or None

def build_session(environ, identity_service):
    """
    요청 헤더의 토큰으로 RequestSession을 만듭니다. 토큰이 없으면 익명 세션입니다.

    Raises:
        TokenInvalidError: 토큰이 있지만 유효하지 않거나 만료되었을 때.
    """
    token = get_bearer_token(environ)
    if not token:
        return RequestSession.anonymous()
    token_data = identity_service.validate_token(token)
    return RequestSession(
        user_id=token_data['user_id'],
        role=token_data['role'],
        company_id=token_data['company_id'],
    )

def handle_exception(e):
    error_map = {
        ValidationError: "400 Bad Request",
        TokenInvalidError: "401 Unauthorized",
        AuthenticationError: "401 Unauthorized",
        PermissionDeniedError: "403 Forbidden",
        NotFoundError: "404 Not Found",
    }
    status = error_map.get(type(e))
    if status:
        logger.warning("Request rejected (%s): %s", status, e)
        return status, json.dumps({"message": str(e)})

    if isinstance(e, PersistenceError):
        logger.error("Persistence failure: %s", e)
    else:
        logger.exception("Unexpected error while handling request")
    return "500 Internal Server Error", json.dumps({"error": str(e)})

# --------------------------------------------------------------------------
## 핸들러 함수
# --------------------------------------------------------------------------

def create_company_handler(environ, *args):
    data = get_request_data(environ)
    company = environ['services']['identity'].create_company(data.get('name'))
    return '201 Created', json.dumps(company)

def list_companies_handler(environ, *args):
    companies = environ['services']['identity'].list_companies()
    return '200 OK', json.dumps(companies)

def create_user_handler(environ, *args):
    data = get_request_data(environ)
    user = environ['services']['identity'].create_user(
        email=data.get('email'),
        password=data.get('password'),
        role_id=data.get('roleId'),
        name=data.get('name'),
        company_id=data.get('companyId'),
    )
    return '201 Created', json.dumps(user)

def list_users_handler(environ, *args):
    users = environ['services']['identity'].list_users()
    return '200 OK', json.dumps(users)

def list_roles_handler(environ, *args):
    roles = environ['services']['identity'].list_roles()
    return '200 OK', json.dumps(roles)

def create_machine_handler(environ, *args):
    data = get_request_data(environ)
    machine = environ['services']['machine'].create_machine(
        data.get('memorySize'), data.get('diskSize'), session=environ['session']
    )
    return '201 Created', json.dumps(machine)

def list_machines_handler(environ, *args):
    machines = environ['services']['machine'].list_machines()
    return '200 OK', json.dumps(machines)

def assign_machine_handler(environ, machine_id):
    data = get_request_data(environ)
    machine = environ['services']['machine'].assign_machine(
        int(machine_id), MachineAssignment.from_request(data), session=environ['session']
    )
    return '200 OK', json.dumps(machine)

def login_handler(environ, *args):
    data = get_request_data(environ)
    result = environ['services']['identity'].authenticate(data.get('email'), data.get('password'))
    return '200 OK', json.dumps(result)

def me_handler(environ, *args):
    session = environ['session']
    if not session.is_authenticated:
        raise TokenInvalidError("Missing bearer token.")
    user = environ['services']['identity'].get_user(session.user_id)
    return '200 OK', json.dumps(user)

ROUTES = [
    ('POST', r'/companies/create', create_company_handler),
    ('GET', r'/companies/get', list_companies_handler),
    ('POST', r'/users/create', create_user_handler),
    ('GET', r'/users/get', list_users_handler),
    ('GET', r'/roles/get', list_roles_handler),
    ('POST', r'/machines/create', create_machine_handler),
    ('GET', r'/machines/get', list_machines_handler),
    ('PATCH', r'/machines/([0-9]+)/assign', assign_machine_handler),
    ('POST', r'/auth/login', login_handler),
    ('GET', r'/auth/me', me_handler),
]

def compile_routes(prefix=""):
    return [
        (method, re.compile(f"^{re.escape(prefix)}{pattern}/?$"), handler)
        for method, pattern, handler in ROUTES
    ]

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

def make_application(session_factory=None, enforce_authorization=None, api_prefix=None):
    """
    WSGI 애플리케이션을 생성합니다.

    Args:
        session_factory: 요청마다 DB 세션을 만드는 팩토리. 기본값은 SessionLocal.
        enforce_authorization: 익명 요청의 머신 생성/할당을 거부할지 여부.
        api_prefix: 모든 경로 앞에 붙는 접두사 (예: "/api").
    """
    session_factory = session_factory or SessionLocal
    if enforce_authorization is None:
        enforce_authorization = config.ENFORCE_AUTHORIZATION
    routes = compile_routes(config.API_PREFIX if api_prefix is None else api_prefix.rstrip("/"))

    def application(environ, start_response):
        db_session = session_factory()
        try:
            # 1. 의존성 생성 (Repositories -> Services)
            role_repo = SqlalchemyRoleRepository(db_session)
            company_repo = SqlalchemyCompanyRepository(db_session)
            user_repo = SqlalchemyUserRepository(db_session)
            machine_repo = SqlalchemyMachineRepository(db_session)

            identity_service = IdentityService(user_repo, company_repo, role_repo)
            machine_service = MachineService(
                machine_repo, company_repo, user_repo, enforce_authorization=enforce_authorization
            )

            # 2. 서비스 객체와 요청 세션을 environ을 통해 핸들러에 전달
            environ['services'] = {
                'identity': identity_service,
                'machine': machine_service,
            }
            environ['session'] = build_session(environ, identity_service)

            # 3. 라우팅 및 핸들러 실행
            path = environ.get("PATH_INFO", "")
            method = environ.get("REQUEST_METHOD", "")

            handler, path_args = None, []
            for route_method, pattern, route_handler in routes:
                if method == route_method and (match := pattern.match(path)):
                    handler, path_args = route_handler, match.groups()
                    break

            if handler:
                status, response_body = handler(environ, *path_args)
            else:
                status, response_body = '404 Not Found', json.dumps({'message': 'Not Found'})

        except Exception as e:
            status, response_body = handle_exception(e)
        finally:
            db_session.close()

        logger.debug("%s %s -> %s", environ.get("REQUEST_METHOD"), environ.get("PATH_INFO"), status)
        start_response(status, [("Content-Type", "application/json")])
        return [response_body.encode("utf-8")]

    return application

application = make_application()

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

def main():
    config.configure_logging()
    try:
        initialize_db()
        with make_server(config.HOST, config.PORT, application) as httpd:
            logger.info("Serving VM inventory on port %s...", config.PORT)
            httpd.serve_forever()
    except Exception:
        logger.exception("Error starting server")
        sys.exit(1)

if __name__ == "__main__":
    main()

# vm_inventory/services/exceptions.py

# --- Request Exceptions ---
class ValidationError(Exception):
    """필수 필드가 없거나 형식이 잘못되었을 때 (호출자가 수정 가능)"""
    pass

class NotFoundError(Exception):
    """요청한 머신, 회사, 사용자, 역할을 찾을 수 없을 때"""
    pass

# --- Storage Exceptions ---
class PersistenceError(Exception):
    """저장소 계층에서 오류 발생 시 (제약 조건 위반, 연결 실패 등)"""
    pass

# --- Auth Exceptions ---
class TokenInvalidError(Exception):
    """토큰이 유효하지 않거나 없을 때"""
    pass

class AuthenticationError(Exception):
    """사용자 자격 증명 실패 시"""
    pass

class PermissionDeniedError(Exception):
    """인증은 되었지만 해당 작업을 수행할 역할이 아닐 때"""
    pass

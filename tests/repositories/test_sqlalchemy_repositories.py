# tests/repositories/test_sqlalchemy_repositories.py
import pytest

from vm_inventory.database import models
from vm_inventory.database.db_init import initialize_db
from vm_inventory.repositories.sqlalchemy import (
    SqlalchemyCompanyRepository,
    SqlalchemyMachineRepository,
    SqlalchemyRoleRepository,
    SqlalchemyUserRepository,
)
from vm_inventory.services.exceptions import PersistenceError

# ===================================================================
#  역할 시드 테스트
# ===================================================================
class TestRoleSeeding:
    def test_seeding_twice_does_not_duplicate(self, engine, session_factory, db_session):
        """두 번의 프로세스 시작을 흉내 내어 시드해도 역할이 정확히 세 개인지 테스트합니다."""
        # === Act ===
        initialize_db(bind=engine, session_factory=session_factory)
        initialize_db(bind=engine, session_factory=session_factory)

        # === Assert ===
        roles = SqlalchemyRoleRepository(db_session).list_all()
        assert sorted(r.name for r in roles) == ["admin", "super_admin", "user"]

    def test_find_or_create_returns_existing(self, db_session):
        repo = SqlalchemyRoleRepository(db_session)

        first = repo.find_or_create("admin")
        second = repo.find_or_create("admin")

        assert first.id == second.id
        assert db_session.query(models.Role).count() == 1

# ===================================================================
#  사용자 / 회사 저장 테스트
# ===================================================================
class TestUserPersistence:
    @pytest.fixture
    def role(self, db_session):
        return SqlalchemyRoleRepository(db_session).find_or_create("user")

    @pytest.fixture
    def company(self, db_session):
        return SqlalchemyCompanyRepository(db_session).create(models.Company(name="Acme"))

    def test_create_and_list_users_with_relations(self, db_session, role, company):
        repo = SqlalchemyUserRepository(db_session)
        repo.create(models.User(name="Jane", email="jane@acme.io", password_hash="h", role_id=role.id, company_id=company.id))

        users = repo.list_all()

        assert len(users) == 1
        assert users[0].role.name == "user"
        assert users[0].company.name == "Acme"
        assert repo.find_by_email("jane@acme.io").id == users[0].id

    def test_missing_company_raises_persistence_error(self, db_session, role):
        """company_id 없이 저장하면 NOT NULL 제약 위반이 PersistenceError로 변환되는지 테스트합니다."""
        repo = SqlalchemyUserRepository(db_session)

        with pytest.raises(PersistenceError):
            repo.create(models.User(name="Jane", email="jane@acme.io", password_hash="h", role_id=role.id))
        # 롤백 후에도 세션은 계속 사용할 수 있어야 합니다.
        assert repo.list_all() == []

    def test_unknown_company_violates_foreign_key(self, db_session, role):
        repo = SqlalchemyUserRepository(db_session)

        with pytest.raises(PersistenceError):
            repo.create(models.User(name="Jane", email="jane@acme.io", password_hash="h", role_id=role.id, company_id=999))

    def test_duplicate_email_raises_persistence_error(self, db_session, role, company):
        repo = SqlalchemyUserRepository(db_session)
        repo.create(models.User(name="Jane", email="jane@acme.io", password_hash="h", role_id=role.id, company_id=company.id))

        with pytest.raises(PersistenceError):
            repo.create(models.User(name="Jim", email="jane@acme.io", password_hash="h", role_id=role.id, company_id=company.id))

# ===================================================================
#  머신 저장 테스트
# ===================================================================
class TestMachinePersistence:
    def test_new_machine_has_no_owner(self, db_session):
        machine = SqlalchemyMachineRepository(db_session).create(models.Machine(memory_size=4096, disk_size=80))

        assert machine.id is not None
        assert machine.company_id is None
        assert machine.admin_id is None

    def test_save_and_list_with_company(self, db_session):
        company = SqlalchemyCompanyRepository(db_session).create(models.Company(name="Acme"))
        repo = SqlalchemyMachineRepository(db_session)
        machine = repo.create(models.Machine(memory_size=4096, disk_size=80))

        machine.company_id = company.id
        repo.save(machine)

        listed = repo.list_all()
        assert listed[0].company.name == "Acme"
        assert listed[0].admin is None

    def test_list_in_insertion_order(self, db_session):
        repo = SqlalchemyMachineRepository(db_session)
        for size in (1024, 2048, 4096):
            repo.create(models.Machine(memory_size=size, disk_size=10))

        assert [m.memory_size for m in repo.list_all()] == [1024, 2048, 4096]

    def test_out_of_range_integer_raises_persistence_error(self, db_session):
        """SQLite INTEGER 범위를 넘는 값은 롤백 후 PersistenceError로 변환되는지 테스트합니다."""
        repo = SqlalchemyMachineRepository(db_session)

        with pytest.raises(PersistenceError):
            repo.create(models.Machine(memory_size=10 ** 30, disk_size=80))
        assert repo.list_all() == []

    def test_find_by_id_missing(self, db_session):
        assert SqlalchemyMachineRepository(db_session).find_by_id(12345) is None

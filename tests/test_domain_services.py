"""Tests for users, clients, catalog, projects, service requests and stats services."""

import unittest
from decimal import Decimal
from unittest.mock import patch

from sqlalchemy import event

from app.core.errors import (
    AlreadyApprovedError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from app.models import (
    Project,
    ProjectEmployee,
    ProjectStatus,
    RequestStatus,
    Role,
    ServiceRequest,
    User,
)
from app.schemas.catalog import ServiceUpdate
from app.schemas.projects import ProjectCreate
from app.schemas.service_requests import ServiceRequestCreate
from app.schemas.users import ProfileUpdate, UserCreate, UserUpdate
from app.services import catalog, clients, projects, service_requests, stats, users
from app.services.authorization import Actor
from sqlite_support import AcmeScenario, add_user, close_session, new_session


class ServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = new_session()
        self.s = AcmeScenario(self.db)

    def tearDown(self) -> None:
        close_session(self.db)

    def actor(self, user: User) -> Actor:
        return Actor.from_user(user)


class TestUsers(ServiceTestCase):
    def _create(self, **overrides: object) -> User:
        data = {
            "name": "Nina",
            "email": "nina@example.com",
            "password": "longenough",
            "role": Role.EMPLOYEE,
        }
        data.update(overrides)
        return users.create_user(self.db, UserCreate(**data))

    def test_create_normalizes_email_and_hashes_password(self) -> None:
        user = self._create(email="Nina@Example.com")
        self.assertEqual(user.email, "nina@example.com")
        self.assertNotEqual(user.password_hash, "longenough")
        self.assertTrue(user.is_active)

    def test_duplicate_email_conflicts(self) -> None:
        with self.assertRaises(ConflictError):
            self._create(email="ERIN@example.com")

    def test_email_claimed_between_check_and_commit(self) -> None:
        with patch.object(users, "_email_taken", return_value=False):
            with self.assertRaises(ConflictError):
                self._create(email="erin@example.com")
            with self.assertRaises(ConflictError):
                users.update_own_profile(
                    self.db, self.s.bench.id, ProfileUpdate(email="carla@example.com")
                )
        self.assertEqual(
            self.db.query(User).filter(User.email == "erin@example.com").count(), 1
        )
        self.assertEqual(self.db.get(User, self.s.bench.id).email, "bert@example.com")

    def test_client_requires_company(self) -> None:
        with self.assertRaises(BadRequestError):
            self._create(role=Role.CLIENT)

    def test_client_with_unknown_company(self) -> None:
        with self.assertRaises(NotFoundError):
            self._create(role=Role.CLIENT, client_company_id=9999)

    def test_list_active_only_with_pagination(self) -> None:
        add_user(self.db, "Retired", Role.EMPLOYEE, is_active=False)
        items, total = users.list_users(self.db)
        self.assertEqual(total, 6)
        self.assertTrue(all(u.is_active for u in items))

        employees, employee_total = users.list_users(self.db, role=Role.EMPLOYEE)
        self.assertEqual(employee_total, 2)
        self.assertEqual({u.name for u in employees}, {"Erin", "Bert"})

        page_two, total = users.list_users(self.db, page=2, limit=4)
        self.assertEqual(total, 6)
        self.assertEqual(len(page_two), 2)

    def test_update_rechecks_client_link(self) -> None:
        with self.assertRaises(BadRequestError):
            users.update_user(self.db, self.s.bench.id, UserUpdate(role=Role.CLIENT))
        with self.assertRaises(BadRequestError):
            users.update_user(self.db, self.s.client.id, UserUpdate(client_company_id=None))
        moved = users.update_user(
            self.db, self.s.client.id, UserUpdate(client_company_id=self.s.globex.id)
        )
        self.assertEqual(moved.client_company_id, self.s.globex.id)

    def test_update_email_in_use(self) -> None:
        with self.assertRaises(ConflictError):
            users.update_user(self.db, self.s.bench.id, UserUpdate(email="erin@example.com"))

    def test_own_profile(self) -> None:
        updated = users.update_own_profile(
            self.db, self.s.bench.id, ProfileUpdate(name="Bertram", email="bertram@example.com")
        )
        self.assertEqual(updated.name, "Bertram")
        self.assertEqual(updated.role, "EMPLOYEE")
        with self.assertRaises(ConflictError):
            users.update_own_profile(self.db, self.s.bench.id, ProfileUpdate(email="carla@example.com"))

    def test_deactivate_is_soft(self) -> None:
        users.deactivate_user(self.db, self.s.bench.id)
        row = self.db.get(User, self.s.bench.id)
        self.assertIsNotNone(row)
        self.assertFalse(row.is_active)

    def test_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError):
            users.get_user(self.db, 424242)


class TestClients(ServiceTestCase):
    def test_referenced_company_cannot_be_deleted(self) -> None:
        with self.assertRaises(ConflictError):
            clients.delete_company(self.db, self.s.acme.id)

    def test_unreferenced_company_deleted(self) -> None:
        company = clients.create_company(self.db, "  Initech ")
        self.assertEqual(company.name, "Initech")
        clients.delete_company(self.db, company.id)
        with self.assertRaises(NotFoundError):
            clients.update_company(self.db, company.id, "Initrode")

    def test_company_projects_for_own_client_only(self) -> None:
        rows = clients.list_company_projects(self.db, self.actor(self.s.client), self.s.acme.id)
        self.assertEqual([p.id for p in rows], [self.s.project.id])
        with self.assertRaises(ForbiddenError):
            clients.list_company_projects(self.db, self.actor(self.s.client), self.s.globex.id)
        with self.assertRaises(ForbiddenError):
            clients.list_company_projects(self.db, self.actor(self.s.admin), self.s.acme.id)
        with self.assertRaises(ForbiddenError):
            clients.list_company_projects(self.db, self.actor(self.s.loose_client), self.s.acme.id)


class TestCatalog(ServiceTestCase):
    def test_update_and_delete(self) -> None:
        updated = catalog.update_service(
            self.db, self.s.website.id, ServiceUpdate(price=Decimal("250.50"))
        )
        self.assertEqual(updated.price, Decimal("250.50"))
        self.assertEqual(updated.name, "Website")
        catalog.delete_service(self.db, self.s.website.id)
        with self.assertRaises(NotFoundError):
            catalog.get_service(self.db, self.s.website.id)

    def test_requested_service_cannot_be_deleted(self) -> None:
        service_requests.create_request(
            self.db,
            self.actor(self.s.client),
            ServiceRequestCreate(service_id=self.s.website.id, client_id=self.s.acme.id),
        )
        with self.assertRaises(ConflictError):
            catalog.delete_service(self.db, self.s.website.id)


class TestProjects(ServiceTestCase):
    def _visible(self, user: User) -> set[int]:
        return {p.id for p in projects.list_projects(self.db, self.actor(user))}

    def test_list_is_scoped_by_role(self) -> None:
        self.assertEqual(self._visible(self.s.admin), {self.s.project.id, self.s.globex_project.id})
        self.assertEqual(self._visible(self.s.employee), {self.s.project.id})
        self.assertEqual(self._visible(self.s.bench), set())
        self.assertEqual(self._visible(self.s.client), {self.s.project.id})
        self.assertEqual(self._visible(self.s.other_client), {self.s.globex_project.id})
        self.assertEqual(self._visible(self.s.loose_client), set())

    def test_get_applies_visibility(self) -> None:
        project = projects.get_project(self.db, self.actor(self.s.employee), self.s.project.id)
        self.assertEqual(project.client.name, "Acme")
        with self.assertRaises(ForbiddenError):
            projects.get_project(self.db, self.actor(self.s.bench), self.s.project.id)
        with self.assertRaises(ForbiddenError):
            projects.get_project(self.db, self.actor(self.s.client), self.s.globex_project.id)
        with self.assertRaises(NotFoundError):
            projects.get_project(self.db, self.actor(self.s.admin), 9999)

    def test_create_needs_existing_company(self) -> None:
        with self.assertRaises(NotFoundError):
            projects.create_project(self.db, ProjectCreate(name="Ghost", client_id=9999))
        project = projects.create_project(
            self.db, ProjectCreate(name="Intranet", client_id=self.s.acme.id)
        )
        self.assertEqual(project.status, ProjectStatus.NOT_STARTED)
        self.assertEqual(project.assignments, [])

    def test_assign_only_active_employees(self) -> None:
        with self.assertRaises(ForbiddenError):
            projects.assign_employees(self.db, self.s.project.id, [self.s.bench.id, self.s.client.id])
        retired = add_user(self.db, "Retired", Role.EMPLOYEE, is_active=False)
        with self.assertRaises(ForbiddenError):
            projects.assign_employees(self.db, self.s.project.id, [retired.id])

    def test_assign_skips_existing(self) -> None:
        project = projects.assign_employees(
            self.db, self.s.project.id, [self.s.employee.id, self.s.bench.id, self.s.bench.id]
        )
        ids = sorted(a.employee_id for a in project.assignments)
        self.assertEqual(ids, sorted([self.s.employee.id, self.s.bench.id]))

    def test_unassign_self_guard_runs_before_lookup(self) -> None:
        with self.assertRaises(ForbiddenError) as ctx:
            projects.unassign_employee(self.db, self.actor(self.s.admin), 9999, self.s.admin.id)
        self.assertEqual(ctx.exception.message, "Cannot unassign yourself")

    def test_unassign(self) -> None:
        admin = self.actor(self.s.admin)
        with self.assertRaises(NotFoundError):
            projects.unassign_employee(self.db, admin, self.s.project.id, self.s.bench.id)
        project = projects.unassign_employee(self.db, admin, self.s.project.id, self.s.employee.id)
        self.assertEqual(project.assignments, [])

    def test_status_update_by_assignee_or_admin(self) -> None:
        with self.assertRaises(ForbiddenError):
            projects.update_status(
                self.db, self.actor(self.s.bench), self.s.project.id, ProjectStatus.IN_PROGRESS
            )
        with self.assertRaises(ForbiddenError):
            projects.update_status(
                self.db, self.actor(self.s.client), self.s.project.id, ProjectStatus.IN_PROGRESS
            )
        project = projects.update_status(
            self.db, self.actor(self.s.employee), self.s.project.id, ProjectStatus.COMPLETED
        )
        self.assertEqual(project.status, ProjectStatus.COMPLETED)
        project = projects.update_status(
            self.db, self.actor(self.s.admin), self.s.project.id, ProjectStatus.NOT_STARTED
        )
        self.assertEqual(project.status, ProjectStatus.NOT_STARTED)

    def _assignment_count(self, project_id: int) -> int:
        return (
            self.db.query(ProjectEmployee)
            .filter(ProjectEmployee.project_id == project_id)
            .count()
        )

    def test_delete_removes_assignments(self) -> None:
        project_id = self.s.project.id
        projects.delete_project(self.db, project_id)
        self.assertIsNone(self.db.get(Project, project_id))
        self.assertEqual(self._assignment_count(project_id), 0)
        with self.assertRaises(NotFoundError):
            projects.delete_project(self.db, project_id)

    def test_failed_delete_keeps_project_and_assignments(self) -> None:
        project_id = self.s.project.id
        engine = self.db.get_bind()

        def fail_project_delete(conn, cursor, statement, parameters, context, executemany):
            if statement.lstrip().upper().startswith("DELETE FROM PROJECTS "):
                raise RuntimeError("project delete failed")

        event.listen(engine, "before_cursor_execute", fail_project_delete)
        try:
            with self.assertRaises(RuntimeError):
                projects.delete_project(self.db, project_id)
        finally:
            event.remove(engine, "before_cursor_execute", fail_project_delete)

        self.db.expire_all()
        self.assertIsNotNone(self.db.get(Project, project_id))
        self.assertEqual(self._assignment_count(project_id), 1)

    def test_assign_retries_after_concurrent_duplicate(self) -> None:
        real_lookup = projects._existing_assignments
        calls = []

        def stale_then_fresh(db, project_id, employee_ids):
            calls.append(project_id)
            if len(calls) == 1:
                return set()
            return real_lookup(db, project_id, employee_ids)

        with patch.object(projects, "_existing_assignments", side_effect=stale_then_fresh):
            project = projects.assign_employees(
                self.db, self.s.project.id, [self.s.employee.id, self.s.bench.id]
            )
        self.assertEqual(len(calls), 2)
        ids = sorted(a.employee_id for a in project.assignments)
        self.assertEqual(ids, sorted([self.s.employee.id, self.s.bench.id]))


class TestServiceRequests(ServiceTestCase):
    def _request(self, user: User, company_id: int, details: str | None = "Need a landing page"):
        return service_requests.create_request(
            self.db,
            self.actor(user),
            ServiceRequestCreate(
                service_id=self.s.website.id, client_id=company_id, details=details
            ),
        )

    def test_client_creates_for_own_company(self) -> None:
        request = self._request(self.s.client, self.s.acme.id)
        self.assertEqual(request.status, RequestStatus.PENDING)
        self.assertEqual(request.created_by, self.s.client.id)
        with self.assertRaises(ForbiddenError):
            self._request(self.s.client, self.s.globex.id)
        with self.assertRaises(ForbiddenError):
            self._request(self.s.loose_client, self.s.acme.id)

    def test_unknown_service(self) -> None:
        with self.assertRaises(NotFoundError):
            service_requests.create_request(
                self.db,
                self.actor(self.s.client),
                ServiceRequestCreate(service_id=9999, client_id=self.s.acme.id),
            )

    def test_approve_creates_project_once(self) -> None:
        request = self._request(self.s.client, self.s.acme.id)
        admin = self.actor(self.s.admin)
        before = self.db.query(Project).count()

        project = service_requests.approve_request(self.db, admin, request.id)
        self.assertEqual(project.name, "Website for Acme")
        self.assertEqual(project.description, "Need a landing page")
        self.assertEqual(project.client_id, self.s.acme.id)
        self.assertEqual(project.status, ProjectStatus.NOT_STARTED)
        self.db.expire_all()
        self.assertEqual(self.db.query(Project).count(), before + 1)

        with self.assertRaises(AlreadyApprovedError) as ctx:
            service_requests.approve_request(self.db, admin, request.id)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(self.db.query(Project).count(), before + 1)

    def test_failed_approval_changes_nothing(self) -> None:
        request_id = self._request(self.s.client, self.s.acme.id).id
        admin = self.actor(self.s.admin)
        before = self.db.query(Project).count()

        def fail_insert(mapper, connection, target):
            raise RuntimeError("project insert failed")

        event.listen(Project, "before_insert", fail_insert)
        try:
            with self.assertRaises(RuntimeError):
                service_requests.approve_request(self.db, admin, request_id)
        finally:
            event.remove(Project, "before_insert", fail_insert)

        self.db.expire_all()
        self.assertEqual(self.db.get(ServiceRequest, request_id).status, RequestStatus.PENDING)
        self.assertEqual(self.db.query(Project).count(), before)

        project = service_requests.approve_request(self.db, admin, request_id)
        self.assertEqual(project.name, "Website for Acme")
        self.assertEqual(self.db.query(Project).count(), before + 1)

    def test_only_admin_approves(self) -> None:
        request = self._request(self.s.client, self.s.acme.id)
        with self.assertRaises(ForbiddenError):
            service_requests.approve_request(self.db, self.actor(self.s.employee), request.id)
        with self.assertRaises(NotFoundError):
            service_requests.approve_request(self.db, self.actor(self.s.admin), 9999)

    def test_list_is_scoped(self) -> None:
        self._request(self.s.client, self.s.acme.id)

        def ids(user: User) -> list[int]:
            return [r.client_id for r in service_requests.list_requests(self.db, self.actor(user))]

        self.assertEqual(ids(self.s.admin), [self.s.acme.id])
        self.assertEqual(ids(self.s.client), [self.s.acme.id])
        self.assertEqual(ids(self.s.other_client), [])
        self.assertEqual(ids(self.s.loose_client), [])
        self.assertEqual(ids(self.s.employee), [])


class TestStats(ServiceTestCase):
    def test_counters(self) -> None:
        add_user(self.db, "Retired", Role.EMPLOYEE, is_active=False)
        service_requests.create_request(
            self.db,
            self.actor(self.s.client),
            ServiceRequestCreate(service_id=self.s.website.id, client_id=self.s.acme.id),
        )
        result = stats.admin_stats(self.db)
        self.assertEqual(result.total_projects, 2)
        self.assertEqual(result.active_employees, 2)
        self.assertEqual(result.active_clients, 3)
        self.assertEqual(result.pending_requests, 1)


if __name__ == "__main__":
    unittest.main()

import unittest
from datetime import date

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401

from user.models import User
from employee.models import Employee, EmploymentStatus
from assignment.models import ShiftAssignment, AssignmentStatus, WorkLocation, WorkType
from assignment.store import SqlAssignmentStore

# Service + DTOs under test
from assignment import service
from assignment.schema import AssignmentCreate, AssignmentUpdate


TODAY = date(2025, 3, 12)


class AssignmentServiceTests(unittest.TestCase):
    def setUp(self):
        # Fresh in-memory DB
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

        # ---- Seed manager + employees ----
        self.mgr = User(email="mgr@example.com", first_name="Mo", last_name="Manager", is_manager=True)
        self.db.add(self.mgr)
        self.db.flush()

        self.alice = Employee(first_name="Alice", last_name="Ames", email="alice@example.com")
        self.bob = Employee(first_name="Bob", last_name="Boyd", email="bob@example.com")
        self.ivy = Employee(
            first_name="Ivy", last_name="Idle", email="ivy@example.com", status=EmploymentStatus.inactive
        )
        self.zed = Employee(first_name="Zed", last_name="Zero", email="zed@example.com", deleted=True)
        self.db.add_all([self.alice, self.bob, self.ivy, self.zed])
        self.db.flush()

        # ---- Seed rows: yesterday, today, tomorrow ----
        self.past = self._row(self.alice.id, date(2025, 3, 11), "09:00", "17:00", group_id="wk")
        self.now = self._row(self.alice.id, TODAY, "09:00", "17:00", group_id="wk")
        self.later = self._row(
            self.bob.id, date(2025, 3, 13), "13:00", "21:00",
            location=WorkLocation.home, work_type=WorkType.overtime, break_duration=30,
        )
        self.db.commit()

        self.store = SqlAssignmentStore(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _row(self, employee_id, day, start, end, **extra):
        values = dict(
            employee_id=employee_id,
            date=day,
            start_time=start,
            end_time=end,
            location=WorkLocation.office,
            work_type=WorkType.regular,
            assigned_by=self.mgr.id,
        )
        values.update(extra)
        row = ShiftAssignment(**values)
        self.db.add(row)
        self.db.flush()
        return row

    def _dto(self, employee_id, **overrides):
        data = dict(
            employee_id=employee_id,
            assigned_by=self.mgr.id,
            date=TODAY,
            start_time="18:00",
            end_time="22:00",
            location=WorkLocation.office,
            work_type=WorkType.regular,
        )
        data.update(overrides)
        return AssignmentCreate(**data)

    # -------------- LIST ----------------

    def test_all_tab_returns_everything_in_date_order(self):
        rows = service.get_assignments(self.store, today=TODAY)
        self.assertEqual([r.id for r in rows], [self.past.id, self.now.id, self.later.id])

    def test_active_tab_is_today_only(self):
        rows = service.get_assignments(self.store, tab="active", today=TODAY)
        self.assertEqual([r.id for r in rows], [self.now.id])

    def test_old_tab_is_before_today_newest_first(self):
        self._row(self.bob.id, date(2025, 3, 1), "09:00", "10:00")
        self.db.commit()
        rows = service.get_assignments(self.store, tab="old", today=TODAY)
        self.assertEqual([r.date for r in rows], [date(2025, 3, 11), date(2025, 3, 1)])

    def test_old_tab_clamps_end_date(self):
        rows = service.get_assignments(self.store, tab="old", end_date=date(2025, 3, 20), today=TODAY)
        self.assertEqual([r.id for r in rows], [self.past.id])

    def test_filters(self):
        rows = service.get_assignments(self.store, employee_id=self.bob.id, today=TODAY)
        self.assertEqual([r.id for r in rows], [self.later.id])
        rows = service.get_assignments(self.store, location=WorkLocation.home, today=TODAY)
        self.assertEqual([r.id for r in rows], [self.later.id])
        rows = service.get_assignments(
            self.store, start_date=date(2025, 3, 12), end_date=date(2025, 3, 12), today=TODAY
        )
        self.assertEqual([r.id for r in rows], [self.now.id])

    def test_grouped_listing(self):
        groups = service.get_grouped_assignments(self.store, today=TODAY)
        self.assertEqual(len(groups), 2)
        wk = next(g for g in groups if g.group_id == "wk")
        self.assertEqual(sorted(wk.assignment_ids), sorted([self.past.id, self.now.id]))
        self.assertEqual(wk.start_date, date(2025, 3, 11))
        self.assertEqual(wk.end_date, TODAY)
        self.assertEqual(wk.assigned_employees[0].employee_name, "Alice Ames")
        self.assertEqual(wk.assigned_by_name, "Mo Manager")

    # -------------- STATISTICS ----------------

    def test_statistics(self):
        stats = service.get_statistics(self.store)
        self.assertEqual(stats.total_shifts, 3)
        self.assertEqual(stats.by_location["Office"], 2)
        self.assertEqual(stats.by_location["Home"], 1)
        self.assertEqual(stats.by_location["Field"], 0)
        self.assertEqual(stats.by_work_type["Overtime"], 1)
        self.assertEqual(stats.by_status["Scheduled"], 3)
        self.assertEqual(stats.total_hours, 23.5)
        self.assertEqual(stats.unique_employees, 2)

    def test_statistics_range(self):
        stats = service.get_statistics(self.store, start_date=TODAY, end_date=TODAY)
        self.assertEqual(stats.total_shifts, 1)
        self.assertEqual(stats.total_hours, 8.0)

    # -------------- CREATE ----------------

    def test_create_assignment_inserts_and_returns(self):
        created = service.create_assignment(self.store, self._dto(self.alice.id, start_time="9:00", end_time="9:30", date=date(2025, 3, 14)))
        self.assertEqual(created.employee_id, self.alice.id)
        self.assertEqual(created.start_time, "09:00")
        self.assertEqual(created.status, AssignmentStatus.scheduled)
        self.assertEqual(created.assigned_by, self.mgr.id)

    def test_create_back_to_back_is_allowed(self):
        created = service.create_assignment(self.store, self._dto(self.alice.id, start_time="17:00", end_time="20:00"))
        self.assertIsNotNone(created.id)

    def test_create_overlapping_is_409_and_writes_nothing(self):
        with self.assertRaises(HTTPException) as cm:
            service.create_assignment(self.store, self._dto(self.alice.id, start_time="16:00", end_time="18:00"))
        self.assertEqual(cm.exception.status_code, 409)
        self.assertEqual(len(cm.exception.detail["conflicts"]), 1)
        self.assertEqual(self.db.query(ShiftAssignment).count(), 3)

    def test_create_404_if_employee_missing_or_deleted(self):
        for emp_id in (4242, self.zed.id):
            with self.subTest(employee_id=emp_id):
                with self.assertRaises(HTTPException) as cm:
                    service.create_assignment(self.store, self._dto(emp_id))
                self.assertEqual(cm.exception.status_code, 404)
                self.assertEqual(cm.exception.detail, "employee not found")

    def test_create_400_if_employee_inactive(self):
        with self.assertRaises(HTTPException) as cm:
            service.create_assignment(self.store, self._dto(self.ivy.id))
        self.assertEqual(cm.exception.status_code, 400)

    def test_create_rejects_bad_time(self):
        with self.assertRaises(ValueError):
            self._dto(self.alice.id, start_time="25:00")

    # -------------- UPDATE ----------------

    def test_update_notes_skips_conflict_check(self):
        updated = service.update_assignment(self.store, self.now.id, AssignmentUpdate(notes="bring badge"))
        self.assertEqual(updated.notes, "bring badge")

    def test_update_time_ignores_own_row(self):
        updated = service.update_assignment(
            self.store, self.now.id, AssignmentUpdate(start_time="10:00", end_time="16:00")
        )
        self.assertEqual((updated.start_time, updated.end_time), ("10:00", "16:00"))

    def test_update_moving_onto_taken_slot_is_409(self):
        with self.assertRaises(HTTPException) as cm:
            service.update_assignment(self.store, self.past.id, AssignmentUpdate(date=TODAY))
        self.assertEqual(cm.exception.status_code, 409)
        self.assertEqual(self.store.get_assignment(self.past.id).date, date(2025, 3, 11))

    def test_cancelling_never_conflicts(self):
        updated = service.update_assignment(
            self.store, self.past.id, AssignmentUpdate(date=TODAY, status=AssignmentStatus.cancelled)
        )
        self.assertEqual(updated.status, AssignmentStatus.cancelled)

    def test_reactivating_onto_taken_slot_is_409(self):
        cancelled = self._row(self.alice.id, TODAY, "12:00", "14:00", status=AssignmentStatus.cancelled)
        self.db.commit()
        with self.assertRaises(HTTPException) as cm:
            service.update_assignment(
                self.store, cancelled.id, AssignmentUpdate(status=AssignmentStatus.scheduled)
            )
        self.assertEqual(cm.exception.status_code, 409)

    def test_update_404(self):
        with self.assertRaises(HTTPException) as cm:
            service.update_assignment(self.store, 9999, AssignmentUpdate(notes="x"))
        self.assertEqual(cm.exception.status_code, 404)

    # -------------- DELETE ----------------

    def test_delete_assignment(self):
        service.delete_assignment(self.store, self.later.id)
        self.assertIsNone(self.store.get_assignment(self.later.id))
        with self.assertRaises(HTTPException) as cm:
            service.delete_assignment(self.store, self.later.id)
        self.assertEqual(cm.exception.status_code, 404)

    def test_delete_group_removes_all_rows(self):
        self.assertEqual(service.delete_group(self.store, "wk"), 2)
        self.assertEqual([r.id for r in service.get_assignments(self.store, today=TODAY)], [self.later.id])

    def test_delete_unknown_group_is_404(self):
        with self.assertRaises(HTTPException) as cm:
            service.delete_group(self.store, "nope")
        self.assertEqual(cm.exception.status_code, 404)
        self.assertEqual(cm.exception.detail, "shift group not found")


if __name__ == "__main__":
    unittest.main()

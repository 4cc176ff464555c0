import unittest
from datetime import date

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401

from user.models import User
from employee.models import Employee
from assignment.models import ShiftAssignment, AssignmentStatus, WorkLocation, WorkType
from assignment.store import SqlAssignmentStore
from assignment.conflicts import detect_conflicts, ensure_no_conflicts
from assignment.timeslot import normalize_hhmm, windows_overlap, to_day


DAY = date(2025, 3, 10)


class ConflictDetectionTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

        self.mgr = User(email="mgr@example.com", first_name="Mo", last_name="Manager", is_manager=True)
        self.db.add(self.mgr)
        self.db.flush()

        self.alice = Employee(first_name="Alice", last_name="Ames", email="alice@example.com")
        self.bob = Employee(first_name="Bob", last_name="Boyd", email="bob@example.com")
        self.db.add_all([self.alice, self.bob])
        self.db.flush()

        self.day_shift = self._row(self.alice.id, DAY, "09:00", "17:00")
        self.db.commit()

        self.store = SqlAssignmentStore(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _row(self, employee_id, day, start, end, status=AssignmentStatus.scheduled):
        row = ShiftAssignment(
            employee_id=employee_id,
            date=day,
            start_time=start,
            end_time=end,
            location=WorkLocation.office,
            work_type=WorkType.regular,
            status=status,
            assigned_by=self.mgr.id,
        )
        self.db.add(row)
        self.db.flush()
        return row

    # -------------- overlap rules ----------------

    def test_touching_windows_do_not_conflict(self):
        self.assertEqual(detect_conflicts(self.store, self.alice.id, "17:00", "20:00", DAY), [])
        self.assertEqual(detect_conflicts(self.store, self.alice.id, "06:00", "09:00", DAY), [])

    def test_partial_overlap_conflicts(self):
        got = detect_conflicts(self.store, self.alice.id, "16:00", "18:00", DAY)
        self.assertEqual([r.id for r in got], [self.day_shift.id])

        got = detect_conflicts(self.store, self.alice.id, "08:00", "09:30", DAY)
        self.assertEqual([r.id for r in got], [self.day_shift.id])

    def test_candidate_inside_or_containing_existing_conflicts(self):
        self.assertEqual(len(detect_conflicts(self.store, self.alice.id, "10:00", "11:00", DAY)), 1)
        self.assertEqual(len(detect_conflicts(self.store, self.alice.id, "07:00", "19:00", DAY)), 1)
        self.assertEqual(len(detect_conflicts(self.store, self.alice.id, "09:00", "17:00", DAY)), 1)

    def test_other_day_or_other_employee_is_free(self):
        self.assertEqual(detect_conflicts(self.store, self.alice.id, "10:00", "11:00", date(2025, 3, 11)), [])
        self.assertEqual(detect_conflicts(self.store, self.bob.id, "10:00", "11:00", DAY), [])

    def test_cancelled_and_swapped_rows_are_ignored(self):
        self._row(self.bob.id, DAY, "09:00", "12:00", status=AssignmentStatus.cancelled)
        self._row(self.bob.id, DAY, "13:00", "15:00", status=AssignmentStatus.swapped)
        self.db.commit()
        self.assertEqual(detect_conflicts(self.store, self.bob.id, "08:00", "18:00", DAY), [])

    def test_completed_and_missed_rows_still_count(self):
        self._row(self.bob.id, DAY, "09:00", "12:00", status=AssignmentStatus.completed)
        self._row(self.bob.id, DAY, "13:00", "15:00", status=AssignmentStatus.missed)
        self.db.commit()
        self.assertEqual(len(detect_conflicts(self.store, self.bob.id, "08:00", "18:00", DAY)), 2)

    def test_excluded_row_is_skipped(self):
        got = detect_conflicts(
            self.store, self.alice.id, "10:00", "11:00", DAY, exclude_assignment_id=self.day_shift.id
        )
        self.assertEqual(got, [])

    def test_day_given_as_timestamp_string(self):
        got = detect_conflicts(self.store, self.alice.id, "10:00", "11:00", "2025-03-10T15:30:00Z")
        self.assertEqual(len(got), 1)

    def test_detection_does_not_write(self):
        before = self.db.query(ShiftAssignment).count()
        detect_conflicts(self.store, self.alice.id, "10:00", "11:00", DAY)
        self.assertEqual(self.db.query(ShiftAssignment).count(), before)

    # -------------- ensure_no_conflicts ----------------

    def test_ensure_no_conflicts_passes_on_free_slot(self):
        ensure_no_conflicts(self.store, self.alice.id, "18:00", "22:00", DAY)

    def test_ensure_no_conflicts_raises_409_with_details(self):
        self._row(self.alice.id, DAY, "17:00", "19:00")
        self.db.commit()

        with self.assertRaises(HTTPException) as cm:
            ensure_no_conflicts(self.store, self.alice.id, "16:00", "18:00", DAY)
        self.assertEqual(cm.exception.status_code, 409)
        detail = cm.exception.detail
        self.assertIn("2 shift(s) on 2025-03-10", detail["message"])
        self.assertIn("16:00 - 18:00", detail["message"])
        self.assertEqual(len(detail["conflicts"]), 2)
        first = detail["conflicts"][0]
        self.assertEqual(first["date"], "2025-03-10")
        self.assertEqual(first["location"], "Office")
        self.assertEqual(first["status"], "Scheduled")


class TimeslotTests(unittest.TestCase):
    def test_normalize_pads_hour(self):
        self.assertEqual(normalize_hhmm("9:00"), "09:00")
        self.assertEqual(normalize_hhmm("23:59"), "23:59")

    def test_normalize_rejects_bad_values(self):
        for bad in ("24:00", "12:60", "noon", "", "9"):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    normalize_hhmm(bad)

    def test_windows_overlap_is_half_open(self):
        self.assertFalse(windows_overlap("12:00", "13:00", "09:00", "12:00"))
        self.assertTrue(windows_overlap("11:59", "13:00", "09:00", "12:00"))
        self.assertTrue(windows_overlap("08:00", "13:00", "09:00", "12:00"))

    def test_windows_overlap_is_symmetric(self):
        grid = [f"{m // 60:02d}:{m % 60:02d}" for m in range(6 * 60, 12 * 60 + 1, 30)]
        windows = [(s, e) for s in grid for e in grid if s < e]
        for a in windows:
            for b in windows:
                self.assertEqual(
                    windows_overlap(a[0], a[1], b[0], b[1]),
                    windows_overlap(b[0], b[1], a[0], a[1]),
                    f"{a} vs {b}",
                )

    def test_to_day(self):
        self.assertEqual(to_day("2025-03-10"), DAY)
        self.assertEqual(to_day(DAY), DAY)
        with self.assertRaises(TypeError):
            to_day(20250310)


if __name__ == "__main__":
    unittest.main()

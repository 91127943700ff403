from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Callable, Iterable
from contextlib import contextmanager
from threading import Lock, RLock, local

from termplan.schemas.instructor import Instructor
from termplan.schemas.report import Assignment, AutoAssignResult
from termplan.schemas.request import FacultyRequest, PreferenceRow
from termplan.schemas.section import ClassSection, SectionStatus
from termplan.services.records import (
    INSTRUCTORS,
    REQUESTS,
    SECTIONS,
    load_instructors,
    load_requests,
    load_sections,
)
from termplan.services.store import DocumentStore
from termplan.services.time_model import days_to_codes

logger = logging.getLogger(__name__)

MISSING_SENIORITY = 999
RESULT_HISTORY = 20


def title_matches(section_title: str, preference_title: str) -> bool:
    """Loose either-direction containment so truncated or expanded titles still pair up."""
    section_value = (section_title or "").lower()
    preference_value = (preference_title or "").lower()
    return section_value in preference_value or preference_value in section_value


def days_compatible(section: ClassSection, preference: PreferenceRow) -> bool:
    # Only scheduled sections are checked, and only against a preference that names days.
    if not (section.begin_time and section.meeting_days):
        return True
    if not preference.days_available:
        return True
    preferred = days_to_codes(preference.days_available)
    meeting = section.meeting_days.upper()
    return meeting in preferred or preferred in meeting


def assigned_count(faculty_name: str, sections: Iterable[ClassSection]) -> int:
    return sum(1 for section in sections if section.faculty == faculty_name and section.counts_toward_load)


def order_by_seniority(requests: Iterable[FacultyRequest], instructors: Iterable[Instructor]) -> list[FacultyRequest]:
    seniority_by_name: dict[str, int] = {}
    for instructor in instructors:
        if instructor.seniority is not None:
            seniority_by_name.setdefault(instructor.name, instructor.seniority)
    return sorted(requests, key=lambda request: seniority_by_name.get(request.name, MISSING_SENIORITY))


def plan_assignments(
    requests: list[FacultyRequest],
    instructors: list[Instructor],
    sections: list[ClassSection],
) -> tuple[list[Assignment], list[str]]:
    """Greedy, first-fit binding of unstaffed sections to ranked preferences.

    Returns the planned assignments and the names of requests skipped because
    their desired load is already met. Inputs are not modified.
    """
    active_sections = [section for section in sections if section.is_active]
    claimed: set[str] = set()
    assignments: list[Assignment] = []
    satisfied: list[str] = []

    for request in order_by_seniority(requests, instructors):
        count = assigned_count(request.name, active_sections)
        if count >= request.load_desired:
            satisfied.append(request.name)
            logger.debug("Request from %s already satisfied (%d/%d)", request.name, count, request.load_desired)
            continue

        for preference in request.ranked_preferences:
            if count >= request.load_desired:
                break
            candidate = next(
                (
                    section
                    for section in active_sections
                    if section.id not in claimed
                    and section.is_unassigned
                    and title_matches(section.title, preference.class_title)
                    and days_compatible(section, preference)
                ),
                None,
            )
            if candidate is None:
                continue
            claimed.add(candidate.id)
            count += 1
            assignments.append(
                Assignment(
                    section_id=candidate.id,
                    faculty=request.name,
                    preference_rank=preference.rank,
                    class_title=preference.class_title,
                )
            )

    return assignments, satisfied


class AssignmentRunGuard:
    """Serializes matcher runs per department and numbers them.

    A run's writes notify listeners on the same thread, so a listener that
    wants another run must not wait on the lock its own thread holds. It
    registers an ``after_release`` callback instead, which runs once the
    outermost hold on that thread ends.
    """

    def __init__(self) -> None:
        self._locks: dict[str, RLock] = defaultdict(RLock)
        self._counters: dict[str, int] = defaultdict(int)
        self._registry_lock = Lock()
        self._local = local()

    def _held(self) -> dict[str, list[Callable[[], None]]]:
        held = getattr(self._local, "held", None)
        if held is None:
            held = self._local.held = {}
        return held

    def in_run(self, department_id: str) -> bool:
        """True when the calling thread is inside a run for the department."""
        return department_id in self._held()

    def after_release(self, department_id: str, callback: Callable[[], None]) -> None:
        callbacks = self._held()[department_id]
        if callback not in callbacks:
            callbacks.append(callback)

    @contextmanager
    def hold(self, department_id: str):
        with self._registry_lock:
            lock = self._locks[department_id]
        held = self._held()
        outermost = department_id not in held
        with lock:
            if outermost:
                held[department_id] = []
            with self._registry_lock:
                self._counters[department_id] += 1
                run_id = self._counters[department_id]
            try:
                yield run_id
            finally:
                callbacks = held.pop(department_id) if outermost else []
        for callback in callbacks:
            callback()

    def runs(self, department_id: str) -> int:
        with self._registry_lock:
            return self._counters[department_id]


run_guard = AssignmentRunGuard()


def run_auto_assignment(
    store: DocumentStore,
    department_id: str,
    guard: AssignmentRunGuard | None = None,
) -> AutoAssignResult:
    """Plan against the latest department snapshot and dispatch every update."""
    guard = guard or run_guard
    with guard.hold(department_id) as run_id:
        sections = load_sections(store, department_id)
        requests = load_requests(store, department_id)
        instructors = load_instructors(store, department_id)

        assignments, satisfied = plan_assignments(requests, instructors, sections)
        for assignment in assignments:
            # Binding is itself a modification, whatever the prior status was.
            store.update(
                SECTIONS,
                assignment.section_id,
                {"faculty": assignment.faculty, "status": SectionStatus.change.value},
            )

        logger.info(
            "Auto-assign run %d for %s bound %d section(s); %d request(s) already satisfied",
            run_id,
            department_id,
            len(assignments),
            len(satisfied),
        )
        return AutoAssignResult(
            run_id=run_id,
            department_id=department_id,
            assignments=assignments,
            satisfied_requests=satisfied,
        )


class AutoAssignController:
    """The auto-assign toggle: while enabled, every relevant change triggers a run.

    Changes that arrive while a run is in flight (including the echoes of the
    run's own writes) are folded into a single follow-up run.
    """

    WATCHED = (SECTIONS, REQUESTS, INSTRUCTORS)

    def __init__(self, store: DocumentStore, department_id: str, guard: AssignmentRunGuard | None = None) -> None:
        self.store = store
        self.department_id = department_id
        self.guard = guard or run_guard
        self.results: deque[AutoAssignResult] = deque(maxlen=RESULT_HISTORY)
        self.run_count = 0
        self._unsubscribers: list[Callable[[], None]] = []
        self._state_lock = Lock()
        self._running = False
        self._pending = False

    @property
    def enabled(self) -> bool:
        return bool(self._unsubscribers)

    def enable(self) -> None:
        if self.enabled:
            return
        self._unsubscribers = [self.store.subscribe(name, self._on_change) for name in self.WATCHED]
        self.request_run()

    def disable(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def set_enabled(self, enabled: bool) -> None:
        if enabled:
            self.enable()
        else:
            self.disable()

    def _on_change(self, _snapshot: list[dict]) -> None:
        if self.enabled:
            self.request_run()

    def _follow_up(self) -> None:
        if self.enabled:
            self.request_run()

    def request_run(self) -> None:
        with self._state_lock:
            if self._running:
                self._pending = True
                logger.debug("Auto-assign run already in progress for %s; queued a follow-up", self.department_id)
                return
            if self.guard.in_run(self.department_id):
                # Echo of another run's writes on this thread.
                self.guard.after_release(self.department_id, self._follow_up)
                logger.debug("Auto-assign for %s deferred until the current run releases", self.department_id)
                return
            self._running = True

        try:
            while True:
                self.results.append(run_auto_assignment(self.store, self.department_id, guard=self.guard))
                self.run_count += 1
                with self._state_lock:
                    if not self._pending or not self.enabled:
                        self._pending = False
                        self._running = False
                        return
                    self._pending = False
        except Exception:
            with self._state_lock:
                self._running = False
                self._pending = False
            raise


class AutoAssignToggles:
    """App-lifetime auto-assign controllers, one per department."""

    def __init__(self, guard: AssignmentRunGuard | None = None) -> None:
        self.guard = guard or run_guard
        self._controllers: dict[str, AutoAssignController] = {}
        self._lock = Lock()

    def get(self, department_id: str) -> AutoAssignController | None:
        with self._lock:
            return self._controllers.get(department_id)

    def set_enabled(self, department_id: str, enabled: bool, store: DocumentStore) -> AutoAssignController:
        """Flip the department's toggle; ``store`` must outlive the request that flips it."""
        with self._lock:
            controller = self._controllers.get(department_id)
            if controller is None:
                controller = AutoAssignController(store, department_id, guard=self.guard)
                self._controllers[department_id] = controller
        controller.set_enabled(enabled)
        logger.info("Auto-assign %s for %s", "enabled" if enabled else "disabled", department_id)
        return controller

    def shutdown(self) -> None:
        with self._lock:
            controllers = list(self._controllers.values())
            self._controllers.clear()
        for controller in controllers:
            controller.disable()


auto_assign_toggles = AutoAssignToggles()

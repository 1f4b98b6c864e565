"""State container behind the employee list page.

Owns the in-memory employee list, the search/department filter, the add/edit
form state, notifications, and the deferred delete with undo:

    Idle -> PendingUndo -> CommittedDeleted | Restored

A delete removes the employee from ``employees`` at once and opens an undo
window of ``undo_seconds`` ticks. Undo inside the window restores it; when the
window closes (countdown reaches zero or the undo toast is dismissed) the
server delete is issued as its own task, which always runs to completion and
applies its outcome even if the page has moved on.

All mutation happens on the event loop thread. Overlapping delete calls are
serialized by a lock so only one pending slot exists at a time. Every timer
task has exactly one cancellation path.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from directory.client.api_client import ApiError
from directory.client.forms import REQUIRED_FIELDS_MESSAGE, EmployeeFormData
from directory.core.config import Settings
from directory.models.employee import Employee

logger = logging.getLogger(__name__)

ALL_DEPARTMENTS = "All Departments"


class EmployeeApi(Protocol):
    async def list_employees(self) -> list[Employee]: ...

    async def create_employee(self, payload: dict) -> Employee: ...

    async def update_employee(self, employee_id: str, payload: dict) -> Employee: ...

    async def delete_employee(self, employee_id: str) -> None: ...


@dataclass
class Toast:
    message: str
    kind: str = "success"  # success | error | info | warning


@dataclass
class UndoToast:
    message: str
    time_left: int


@dataclass
class PendingDelete:
    employee: Employee
    undo_invoked: bool = False


def filter_employees(
    employees: list[Employee],
    search_term: str,
    department_filter: str = ALL_DEPARTMENTS,
) -> list[Employee]:
    term = search_term.lower()
    return [
        employee
        for employee in employees
        if (term in employee.name.lower() or term in employee.email.lower())
        and (department_filter == ALL_DEPARTMENTS or employee.department == department_filter)
    ]


class EmployeeListController:
    def __init__(
        self,
        api: EmployeeApi,
        *,
        undo_seconds: int = 5,
        tick_interval: float = 1.0,
        toast_seconds: float = 3.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.api = api
        self.undo_seconds = undo_seconds
        self.tick_interval = tick_interval
        self.toast_seconds = toast_seconds
        # Drives the undo countdown only; toasts use the real clock.
        self._sleep = sleep

        self.employees: list[Employee] = []
        self.search_term = ""
        self.department_filter = ALL_DEPARTMENTS
        self.loading = True
        self.error: str | None = None

        self.show_form = False
        self.editing: Employee | None = None

        self.toast: Toast | None = None
        self.undo_toast: UndoToast | None = None
        self.pending_delete: PendingDelete | None = None

        self._toast_timer: asyncio.Task | None = None
        self._countdown_task: asyncio.Task | None = None
        self._commit_task: asyncio.Task | None = None
        self._delete_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, api: EmployeeApi, settings: Settings) -> EmployeeListController:
        return cls(api, undo_seconds=settings.UNDO_SECONDS, toast_seconds=settings.TOAST_SECONDS)

    @property
    def visible_employees(self) -> list[Employee]:
        return filter_employees(self.employees, self.search_term, self.department_filter)

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    def set_department_filter(self, department: str) -> None:
        self.department_filter = department

    # -- loading -----------------------------------------------------------

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.employees = await self.api.list_employees()
        except ApiError as err:
            logger.warning("Failed to load employees: %s", err.message)
            self.error = err.message or "Failed to load employees"
            self._show_toast("Failed to load employees", "error")
        except Exception:
            logger.exception("Failed to load employees")
            self.error = "Failed to load employees"
            self._show_toast("Failed to load employees", "error")
        finally:
            self.loading = False

    async def retry(self) -> None:
        await self.load()

    # -- add / edit --------------------------------------------------------

    def open_create_form(self) -> None:
        self.editing = None
        self.show_form = True

    def open_edit_form(self, employee: Employee) -> None:
        self.editing = employee
        self.show_form = True

    def cancel_form(self) -> None:
        self.show_form = False
        self.editing = None

    async def save(self, form: EmployeeFormData) -> bool:
        """Create or update from the form. Returns True when the form closed."""
        if form.missing_required():
            self._show_toast(REQUIRED_FIELDS_MESSAGE, "error")
            return False

        payload = form.to_payload()
        try:
            if self.editing is not None:
                target_id = self.editing.id
                updated = await self.api.update_employee(target_id, payload)
                self.employees = [updated if e.id == target_id else e for e in self.employees]
                self._show_toast("Employee updated successfully!", "success")
            else:
                created = await self.api.create_employee(payload)
                self.employees = [created, *self.employees]
                self._show_toast("Employee added successfully!", "success")
        except ApiError as err:
            message = ", ".join(err.errors) if err.errors else err.message or "Failed to save employee"
            self._show_toast(message, "error")
            return False
        except Exception:
            logger.exception("Failed to save employee")
            self._show_toast("Failed to save employee", "error")
            return False

        self.cancel_form()
        return True

    # -- delete / undo -----------------------------------------------------

    async def delete(self, employee: Employee) -> None:
        # One pending slot: finish the previous deferred delete first.
        async with self._delete_lock:
            await self._finalize_pending()

            self.pending_delete = PendingDelete(employee)
            self.employees = [e for e in self.employees if e.id != employee.id]
            self.undo_toast = UndoToast(f"{employee.name} deleted", self.undo_seconds)
            self._countdown_task = asyncio.create_task(self._run_countdown(self.undo_toast))
            logger.info("Delete of %s pending undo", employee.id)

    def undo(self) -> bool:
        pending = self.pending_delete
        if pending is None or pending.undo_invoked or self.undo_toast is None:
            return False

        pending.undo_invoked = True
        self._restore(pending.employee)
        self._show_toast("Delete undone successfully", "info")
        self._close_undo_toast()
        logger.info("Delete of %s undone", pending.employee.id)
        return True

    async def dismiss_undo(self) -> None:
        if self.undo_toast is None:
            return
        commit = self._close_undo_toast()
        if commit is not None:
            await asyncio.shield(commit)

    def close_toast(self) -> None:
        self._cancel_toast_timer()
        self.toast = None

    async def wait_idle(self) -> None:
        """Wait until no countdown or server delete is in progress."""
        while True:
            tasks = {t for t in (self._countdown_task, self._commit_task) if t is not None and not t.done()}
            if not tasks:
                return
            await asyncio.wait(tasks)

    async def aclose(self) -> None:
        """Tear down timers. An abandoned undo window is not committed."""
        cancelled = [t for t in (self._countdown_task, self._toast_timer) if t is not None and not t.done()]
        self._cancel_countdown()
        self._cancel_toast_timer()
        if self._commit_task is not None and not self._commit_task.done():
            await asyncio.wait({self._commit_task})
            if self._toast_timer is not None:
                cancelled.append(self._toast_timer)
                self._cancel_toast_timer()
        if cancelled:
            await asyncio.wait(cancelled)

    async def _finalize_pending(self) -> None:
        if self.undo_toast is not None:
            await self.dismiss_undo()
        if self._commit_task is not None and not self._commit_task.done():
            await asyncio.shield(self._commit_task)

    async def _run_countdown(self, undo_toast: UndoToast) -> None:
        while undo_toast.time_left > 0:
            await self._sleep(self.tick_interval)
            undo_toast.time_left -= 1
        self._close_undo_toast()

    def _close_undo_toast(self) -> asyncio.Task | None:
        self._cancel_countdown()
        self.undo_toast = None

        pending = self.pending_delete
        if pending is None:
            return None
        if pending.undo_invoked:
            self.pending_delete = None
            return None

        self._commit_task = asyncio.create_task(self._commit_delete(pending))
        return self._commit_task

    async def _commit_delete(self, pending: PendingDelete) -> None:
        employee = pending.employee
        try:
            await self.api.delete_employee(employee.id)
        except ApiError as err:
            if err.is_not_found:
                logger.info("Employee %s was already gone on the server", employee.id)
                self._show_toast(f"{employee.name} removed", "success")
            else:
                logger.warning("Delete of %s failed: %s", employee.id, err.message)
                self._restore(employee)
                self._show_toast(f"Failed to delete: {err.message or 'Unknown error'}", "error")
        except Exception as err:
            logger.exception("Delete of %s failed", employee.id)
            self._restore(employee)
            self._show_toast(f"Failed to delete: {err or 'Unknown error'}", "error")
        else:
            self._show_toast(f"{employee.name} permanently deleted", "success")
        finally:
            if self.pending_delete is pending:
                self.pending_delete = None
            pending.undo_invoked = False

    def _restore(self, employee: Employee) -> None:
        if not any(e.id == employee.id for e in self.employees):
            self.employees = [*self.employees, employee]

    def _cancel_countdown(self) -> None:
        task, self._countdown_task = self._countdown_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    # -- notifications -----------------------------------------------------

    def _show_toast(self, message: str, kind: str = "success") -> None:
        self._cancel_toast_timer()
        self.toast = Toast(message, kind)
        self._toast_timer = asyncio.create_task(self._expire_toast(self.toast))

    async def _expire_toast(self, toast: Toast) -> None:
        await asyncio.sleep(self.toast_seconds)
        if self.toast is toast:
            self.toast = None
        self._toast_timer = None

    def _cancel_toast_timer(self) -> None:
        task, self._toast_timer = self._toast_timer, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

"""Plain-text renderers for the employee list page. No state, no side effects."""

from __future__ import annotations

from directory.client.list_controller import ALL_DEPARTMENTS, EmployeeListController, Toast, UndoToast
from directory.models.employee import DEPARTMENTS, Employee

DEPARTMENT_FILTER_OPTIONS: list[str] = [ALL_DEPARTMENTS, *DEPARTMENTS]

_TOAST_ICONS = {
    "success": "✓",
    "error": "✕",
    "info": "ℹ",
    "warning": "⚠",
}


def render_card(employee: Employee) -> str:
    initial = employee.name[:1].upper()
    joined = employee.joining_date.strftime("%Y-%m-%d") if employee.joining_date else "-"
    return "\n".join(
        [
            f"[{initial}] {employee.name}",
            f"    {employee.position}",
            f"    Email:      {employee.email}",
            f"    Phone:      {employee.phone}",
            f"    Department: {employee.department}",
            f"    Joined:     {joined}",
        ]
    )


def render_search_bar(search_term: str, department_filter: str) -> str:
    options = " | ".join(f"*{d}*" if d == department_filter else d for d in DEPARTMENT_FILTER_OPTIONS)
    shown = search_term or "Search by name or email..."
    return f"Search: {shown}\nDepartment: {options}"


def render_toast(toast: Toast) -> str:
    icon = _TOAST_ICONS.get(toast.kind, "")
    return f"{icon} {toast.message}".strip()


def render_undo_toast(undo_toast: UndoToast) -> str:
    return f"🗑️ {undo_toast.message} ({undo_toast.time_left}s) [Undo]"


def render_page(controller: EmployeeListController) -> str:
    if controller.loading:
        return "Loading employees..."

    if controller.error and not controller.employees:
        return f"❌ {controller.error}\n[Retry]"

    lines = [
        "Employee Directory",
        f"Manage and view all employees • Total: {len(controller.employees)}",
        "",
        render_search_bar(controller.search_term, controller.department_filter),
        "",
    ]

    visible = controller.visible_employees
    if not visible:
        lines.append("No employees found")
        lines.append("Try adjusting your search or filter criteria")
    else:
        lines.extend(render_card(employee) for employee in visible)

    if controller.toast is not None:
        lines.extend(["", render_toast(controller.toast)])
    if controller.undo_toast is not None:
        lines.extend(["", render_undo_toast(controller.undo_toast)])

    return "\n".join(lines)

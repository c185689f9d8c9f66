"""
Pages Router
Server-rendered forms and list views. HTMX swaps the partials in place.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.config import settings
from farmledger.database import get_db
from farmledger.exceptions import ConflictError, NotFoundError, RecordValidationError
from farmledger.helpers import page_window, parse_date_param, parse_uuid
from farmledger.models import Gender, MaritalStatus
from farmledger.services import EggInventoryService, EmployeeService


router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

EMPLOYEES_CHANGED = "employees-changed"
INVENTORIES_CHANGED = "inventories-changed"

EMPLOYEE_FORM_FIELDS = (
    "fullName",
    "age",
    "gender",
    "maritalStatus",
    "phoneNumber",
    "aadharNumber",
    "salary",
    "workEmployedToDo",
)
INVENTORY_FORM_FIELDS = ("date", "crack_eggs", "jumbo_eggs", "normal_eggs")
INTEGER_FORM_FIELDS = {"age", "crack_eggs", "jumbo_eggs", "normal_eggs"}


def clean_form(form, fields, keep_blank: bool = False) -> Dict[str, Any]:
    """
    Pick the named inputs, stripped.

    Blank inputs count as missing on a new record. On an edit they are kept,
    so clearing a field fails validation instead of keeping the old value.
    Integer inputs are converted when they parse; anything else is left for
    the schema to reject.
    """
    values: Dict[str, Any] = {}
    for key in fields:
        value = form.get(key)
        if not isinstance(value, str):
            continue
        value = value.strip()
        if not value and not keep_blank:
            continue
        if key in INTEGER_FORM_FIELDS:
            try:
                value = int(value)
            except ValueError:
                pass
        values[key] = value
    return values


def form_record_id(form) -> Optional[str]:
    value = form.get("id")
    if not isinstance(value, str):
        return None
    return value.strip() or None


def field_errors(exc: RecordValidationError) -> Dict[str, str]:
    """Map each failing field's input name to its first message."""
    errors: Dict[str, str] = {}
    for detail in exc.details:
        name = detail["path"][-1] if detail["path"] else "__all__"
        errors.setdefault(name, detail["message"])
    return errors


def pagination_context(pagination) -> Dict[str, Any]:
    first = (pagination.page - 1) * pagination.limit + 1 if pagination.total else 0
    last = min(pagination.page * pagination.limit, pagination.total)
    return {
        "pagination": pagination,
        "pages": page_window(pagination.page, pagination.total_pages),
        "first_row": first,
        "last_row": last,
    }


def toast(request: Request, message: str, type: str = "success") -> str:
    return templates.get_template("partials/toast.html").render(
        request=request, message=message, type=type
    )


# =============================================================================
# Landing page
# =============================================================================

@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render the landing page."""
    return templates.TemplateResponse(request, "index.html", {})


# =============================================================================
# Employees
# =============================================================================

async def render_employee_table(
    service: EmployeeService,
    page: int,
    search: str
) -> Dict[str, Any]:
    employees, pagination = await service.list(
        page=page, limit=settings.default_page_size, search=search
    )
    return {
        "employees": employees,
        "search": search,
        **pagination_context(pagination),
    }


def employee_form_context(
    values: Optional[Dict[str, Any]] = None,
    errors: Optional[Dict[str, str]] = None,
    record_id: Optional[str] = None,
    form_error: Optional[str] = None
) -> Dict[str, Any]:
    return {
        "values": values or {},
        "errors": errors or {},
        "record_id": record_id,
        "form_error": form_error,
        "genders": [g.value for g in Gender],
        "marital_statuses": [m.value for m in MaritalStatus],
    }


@router.get("/employees", response_class=HTMLResponse)
async def employees_page(
    request: Request,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    db: AsyncSession = Depends(get_db)
):
    """Render the employee list page."""
    context = await render_employee_table(EmployeeService(db), page, search)
    context.update(employee_form_context())
    return templates.TemplateResponse(request, "employees.html", context)


@router.get("/employees/table", response_class=HTMLResponse)
async def employees_table(
    request: Request,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    db: AsyncSession = Depends(get_db)
):
    """Render the employee table partial (search and pagination)."""
    context = await render_employee_table(EmployeeService(db), page, search)
    return templates.TemplateResponse(request, "partials/employee_table.html", context)


@router.get("/employees/form", response_class=HTMLResponse)
async def employee_form(
    request: Request,
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Render an empty form, or one filled from an existing employee."""
    if not id:
        return templates.TemplateResponse(
            request, "partials/employee_form.html", employee_form_context()
        )

    employee = await EmployeeService(db).get(parse_uuid(id, "employee ID"))
    values = {
        "fullName": employee.full_name,
        "age": employee.age,
        "gender": employee.gender.value,
        "maritalStatus": employee.marital_status.value,
        "phoneNumber": employee.phone_number,
        "aadharNumber": employee.aadhar_number,
        "salary": employee.salary,
        "workEmployedToDo": employee.work_employed_to_do,
    }
    return templates.TemplateResponse(
        request,
        "partials/employee_form.html",
        employee_form_context(values=values, record_id=str(employee.id))
    )


@router.post("/employees/form", response_class=HTMLResponse)
async def submit_employee_form(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Create or update an employee from the form, re-rendering it on error."""
    form = await request.form()
    record_id = form_record_id(form)
    values = clean_form(form, EMPLOYEE_FORM_FIELDS, keep_blank=record_id is not None)
    service = EmployeeService(db)

    try:
        if record_id:
            await service.update(parse_uuid(record_id, "employee ID"), values)
            message = "Employee updated successfully!"
        else:
            await service.create(values)
            message = "Employee created successfully!"
    except RecordValidationError as exc:
        return templates.TemplateResponse(
            request,
            "partials/employee_form.html",
            employee_form_context(values, field_errors(exc), record_id, exc.message)
        )
    except (ConflictError, NotFoundError) as exc:
        return templates.TemplateResponse(
            request,
            "partials/employee_form.html",
            employee_form_context(values, record_id=record_id, form_error=exc.message)
        )

    form_html = templates.get_template("partials/employee_form.html").render(
        request=request, **employee_form_context()
    )
    return HTMLResponse(
        form_html + toast(request, message),
        headers={"HX-Trigger": EMPLOYEES_CHANGED}
    )


@router.post("/employees/{employee_id}/delete", response_class=HTMLResponse)
async def delete_employee(
    request: Request,
    employee_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete an employee and tell the table to refresh."""
    try:
        await EmployeeService(db).delete(parse_uuid(employee_id, "employee ID"))
    except (NotFoundError, RecordValidationError) as exc:
        return HTMLResponse(toast(request, exc.message, "error"))

    return HTMLResponse(
        toast(request, "Employee deleted successfully!"),
        headers={"HX-Trigger": EMPLOYEES_CHANGED}
    )


# =============================================================================
# Egg inventory
# =============================================================================

async def render_inventory_table(
    service: EggInventoryService,
    page: int,
    start_date: str,
    end_date: str
) -> Dict[str, Any]:
    inventories, pagination = await service.list(
        page=page,
        limit=settings.default_page_size,
        start_date=parse_date_param(start_date, "startDate"),
        end_date=parse_date_param(end_date, "endDate")
    )
    return {
        "inventories": inventories,
        "start_date": start_date,
        "end_date": end_date,
        **pagination_context(pagination),
    }


def inventory_form_context(
    values: Optional[Dict[str, Any]] = None,
    errors: Optional[Dict[str, str]] = None,
    record_id: Optional[str] = None,
    form_error: Optional[str] = None
) -> Dict[str, Any]:
    return {
        "values": values or {},
        "errors": errors or {},
        "record_id": record_id,
        "form_error": form_error,
    }


def filter_error_context(exc: RecordValidationError) -> Dict[str, Any]:
    return {
        "inventories": [],
        "start_date": "",
        "end_date": "",
        "filter_error": "; ".join(d["message"] for d in exc.details),
        "pagination": None,
        "pages": [],
        "first_row": 0,
        "last_row": 0,
    }


@router.get("/eggs", response_class=HTMLResponse)
async def eggs_page(
    request: Request,
    page: int = Query(1, ge=1),
    start_date: str = Query("", alias="startDate"),
    end_date: str = Query("", alias="endDate"),
    db: AsyncSession = Depends(get_db)
):
    """Render the egg inventory page."""
    try:
        context = await render_inventory_table(
            EggInventoryService(db), page, start_date, end_date
        )
    except RecordValidationError as exc:
        context = filter_error_context(exc)
    context.update(inventory_form_context())
    return templates.TemplateResponse(request, "eggs.html", context)


@router.get("/eggs/table", response_class=HTMLResponse)
async def eggs_table(
    request: Request,
    page: int = Query(1, ge=1),
    start_date: str = Query("", alias="startDate"),
    end_date: str = Query("", alias="endDate"),
    db: AsyncSession = Depends(get_db)
):
    """Render the inventory table partial (date filter and pagination)."""
    try:
        context = await render_inventory_table(
            EggInventoryService(db), page, start_date, end_date
        )
    except RecordValidationError as exc:
        context = filter_error_context(exc)
    return templates.TemplateResponse(request, "partials/egg_table.html", context)


@router.get("/eggs/form", response_class=HTMLResponse)
async def egg_form(
    request: Request,
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Render an empty form, or one filled from an existing inventory."""
    if not id:
        return templates.TemplateResponse(
            request, "partials/egg_form.html", inventory_form_context()
        )

    inventory = await EggInventoryService(db).get(parse_uuid(id, "inventory ID"))
    values = {
        "date": inventory.date.isoformat(),
        "crack_eggs": inventory.crack_eggs,
        "jumbo_eggs": inventory.jumbo_eggs,
        "normal_eggs": inventory.normal_eggs,
    }
    return templates.TemplateResponse(
        request,
        "partials/egg_form.html",
        inventory_form_context(values=values, record_id=str(inventory.id))
    )


@router.post("/eggs/form", response_class=HTMLResponse)
async def submit_egg_form(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Create or update an inventory from the form, re-rendering it on error."""
    form = await request.form()
    record_id = form_record_id(form)
    values = clean_form(form, INVENTORY_FORM_FIELDS, keep_blank=record_id is not None)
    service = EggInventoryService(db)

    try:
        if record_id:
            await service.update(parse_uuid(record_id, "inventory ID"), values)
            message = "Egg inventory updated successfully!"
        else:
            await service.create(values)
            message = "Egg inventory created successfully!"
    except RecordValidationError as exc:
        return templates.TemplateResponse(
            request,
            "partials/egg_form.html",
            inventory_form_context(values, field_errors(exc), record_id, exc.message)
        )
    except (ConflictError, NotFoundError) as exc:
        return templates.TemplateResponse(
            request,
            "partials/egg_form.html",
            inventory_form_context(values, record_id=record_id, form_error=exc.message)
        )

    form_html = templates.get_template("partials/egg_form.html").render(
        request=request, **inventory_form_context()
    )
    return HTMLResponse(
        form_html + toast(request, message),
        headers={"HX-Trigger": INVENTORIES_CHANGED}
    )


@router.post("/eggs/{inventory_id}/delete", response_class=HTMLResponse)
async def delete_egg_inventory(
    request: Request,
    inventory_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete an inventory and tell the table to refresh."""
    try:
        await EggInventoryService(db).delete(parse_uuid(inventory_id, "inventory ID"))
    except (NotFoundError, RecordValidationError) as exc:
        return HTMLResponse(toast(request, exc.message, "error"))

    return HTMLResponse(
        toast(request, "Egg inventory deleted successfully!"),
        headers={"HX-Trigger": INVENTORIES_CHANGED}
    )

from typing import List

from fastapi import APIRouter

from services.common.logging_config import get_logger
from services.scheduling.api.calendar import calendar_store
from services.scheduling.schemas import EmployeeCreateRequest, EmployeeResponse

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=EmployeeResponse, status_code=201)
def create_employee(employee_request: EmployeeCreateRequest) -> EmployeeResponse:
    with calendar_store() as store:
        employee = store.add_employee(employee_request.name)
        response = EmployeeResponse.model_validate(employee)
    logger.info("Registered employee", employee_id=response.id)
    return response


@router.get("", response_model=List[EmployeeResponse])
def list_employees() -> List[EmployeeResponse]:
    with calendar_store() as store:
        return [
            EmployeeResponse.model_validate(employee)
            for employee in store.list_employees()
        ]

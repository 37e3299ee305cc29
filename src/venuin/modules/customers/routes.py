"""Customer API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from venuin.core.auth.dependencies import Binder
from venuin.core.auth.principal import Principal
from venuin.core.permissions.dependencies import require_permission
from venuin.modules.customers.models import Customer
from venuin.modules.customers.repos import CustomerRepository
from venuin.modules.customers.schemas import CustomerCreate, CustomerResponse


router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerResponse], summary="List customers")
async def list_customers(
    principal: Annotated[Principal, Depends(require_permission("view_customers"))],
    binder: Binder,
) -> list[CustomerResponse]:
    """List the tenant's customers."""
    async with binder.transaction(principal.tenant_id, principal.role) as session:
        customers = await CustomerRepository(session).list_all()
        return [CustomerResponse.model_validate(customer) for customer in customers]


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create customer",
)
async def create_customer(
    data: CustomerCreate,
    principal: Annotated[Principal, Depends(require_permission("manage_customers"))],
    binder: Binder,
) -> CustomerResponse:
    """Create a customer; emails are unique per tenant."""
    async with binder.transaction(principal.tenant_id, principal.role) as session:
        customer = await CustomerRepository(session).create(
            Customer(
                tenant_id=principal.tenant_id,
                full_name=data.full_name,
                email=data.email.lower(),
                phone=data.phone,
            )
        )
        return CustomerResponse.model_validate(customer)

"""Customer API views.

Exposes the ``CustomerManager`` via HTTP using a DRF ViewSet.
Every manager call returns a ``Result``; ``Failure`` codes are mapped to
HTTP statuses here and rendered as problem details::

    {"status": 409, "code": "CUSTOMER_ALREADY_EXISTS",
     "title": "Customer Already Exists", "detail": "..."}

Store faults are not handled here: they propagate to the API exception
handler.
"""

from __future__ import annotations

from functools import lru_cache

from django.urls import reverse
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.result import Failure, Success
from modules.customers.constants import ErrorCode
from modules.customers.dtos import CreateCustomerDTO
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerManager
from modules.geolocation.services import PositionStackGeolocationService


@lru_cache(maxsize=1)
def get_geolocation_service() -> PositionStackGeolocationService:
    """Process-wide lookup client (one pooled HTTP client per process)."""
    return PositionStackGeolocationService()


def failure_status(code: ErrorCode) -> int:
    match code:
        case ErrorCode.CUSTOMER_ALREADY_EXISTS:
            return status.HTTP_409_CONFLICT
        case ErrorCode.CUSTOMER_DOES_NOT_EXIST | ErrorCode.CUSTOMER_DOES_NOT_HAVE_AN_ADDRESS:
            return status.HTTP_404_NOT_FOUND
        case ErrorCode.COULD_NOT_GET_GEOLOCATION:
            return status.HTTP_400_BAD_REQUEST
        case _:
            return status.HTTP_400_BAD_REQUEST


def failure_response(failure: Failure) -> Response:
    http_status = failure_status(failure.code)
    return Response(
        {
            "status": http_status,
            "code": failure.code.name,
            "title": str(failure.code),
            "detail": failure.description,
        },
        status=http_status,
    )


def _validation_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "non_field_errors"
        errors.setdefault(field, []).append(error["msg"])
    return errors


class CustomerViewSet(ViewSet):
    """ViewSet for the Customer resource.

    Uses ``CustomerManager`` with ``CustomerDjangoRepository`` and the
    PositionStack lookup (DIP).  All ORM access goes through the
    service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._manager = CustomerManager(
            repository=CustomerDjangoRepository(),
            geolocation_service=get_geolocation_service(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/customers/?name=&email="""
        result = self._manager.list_customers(
            name=request.query_params.get("name"),
            email=request.query_params.get("email"),
        )
        match result:
            case Success(value=customers):
                return Response([c.model_dump(mode="json") for c in customers])
            case Failure() as failure:
                return failure_response(failure)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/customers/{pk}/"""
        match self._manager.get_customer(str(pk)):
            case Success(value=customer):
                return Response(CustomerSerializer(customer).data)
            case Failure() as failure:
                return failure_response(failure)

    @action(detail=True, methods=["get"], url_path="geolocation")
    def geolocation(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/customers/{pk}/geolocation/"""
        match self._manager.get_customer_geolocation(str(pk)):
            case Success(value=geolocation):
                return Response(geolocation.model_dump(mode="json"))
            case Failure() as failure:
                return failure_response(failure)

    # ------------------------------------------------------------------
    # Create / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/customers/"""
        try:
            dto = CreateCustomerDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            raise ValidationError(_validation_errors(exc)) from exc

        match self._manager.create_customer(dto):
            case Success(value=customer_id):
                location = request.build_absolute_uri(
                    reverse("customer-detail", args=[str(customer_id)])
                )
                return Response(
                    str(customer_id),
                    status=status.HTTP_201_CREATED,
                    headers={"Location": location},
                )
            case Failure() as failure:
                return failure_response(failure)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/customers/{pk}/"""
        match self._manager.delete_customer(str(pk)):
            case Success():
                return Response(status=status.HTTP_204_NO_CONTENT)
            case Failure() as failure:
                return failure_response(failure)

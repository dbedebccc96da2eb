# clinic_core/patients/api/views.py
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.response import Response

from clinic_core.common.api.exceptions import InternalError
from clinic_core.common.permissions import PatientPermission
from clinic_core.patients.api.serializers import (
    PatientIdPageSerializer,
    PatientIdSerializer,
    PatientIdsQuerySerializer,
    PatientPayloadSerializer,
    PatientSerializer,
)
from clinic_core.patients.selectors import PatientNotFound, get_patient, list_patient_ids
from clinic_core.patients.services import PatientService
from clinic_core.patients.translators import patient_from_wire, patient_to_wire
from clinic_core.patients.validators import validate_patient_record

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND_MSG = "patient is not found"


def _invalid_argument(exc: DjangoValidationError) -> DRFValidationError:
    if hasattr(exc, "error_dict"):
        return DRFValidationError(exc.message_dict)
    return DRFValidationError(exc.messages)


def _internal(action: str, exc: Exception) -> InternalError:
    logger.error("failed to %s: %s", action, exc, exc_info=exc)
    return InternalError(f"failed to {action}: {exc}")


class PatientViewSet(viewsets.ViewSet):
    """
    The patient aggregate RPCs. Every action requires the admin role
    (PatientPermission); the identity service authenticates the bearer token.
    """
    permission_classes = [PatientPermission]
    serializer_class = PatientSerializer
    lookup_value_regex = r"\d+"

    def _record_from_request(self, request, *, patient_id=None):
        ser = PatientPayloadSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        try:
            record = patient_from_wire(ser.validated_data, patient_id=patient_id)
            return validate_patient_record(record)
        except DjangoValidationError as e:
            raise _invalid_argument(e)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="offset", location=OpenApiParameter.QUERY, required=False, type=int),
            OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, required=True, type=int),
            OpenApiParameter(name="search", location=OpenApiParameter.QUERY, required=False, type=str),
        ],
        responses={200: PatientIdPageSerializer},
        tags=["Patients"],
        operation_id="v1_patients_ids",
    )
    def list(self, request):
        query = PatientIdsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            page = list_patient_ids(
                offset=query.validated_data["offset"],
                limit=query.validated_data["limit"],
                search=query.validated_data["search"],
            )
        except DjangoValidationError as e:
            raise _invalid_argument(e)
        except DatabaseError as e:
            raise _internal("fetch patients", e)

        return Response(page.as_dict(), status=status.HTTP_200_OK)

    @extend_schema(responses={200: PatientSerializer}, tags=["Patients"], operation_id="v1_patients_retrieve")
    def retrieve(self, request, pk=None):
        try:
            record = get_patient(patient_id=int(pk))
        except PatientNotFound:
            raise NotFound(PATIENT_NOT_FOUND_MSG)
        except DatabaseError as e:
            raise _internal("fetch a patient by id", e)

        return Response(patient_to_wire(record), status=status.HTTP_200_OK)

    @extend_schema(
        request=PatientPayloadSerializer,
        responses={201: PatientIdSerializer},
        tags=["Patients"],
        operation_id="v1_patients_create",
    )
    def create(self, request):
        record = self._record_from_request(request)

        try:
            patient_id = PatientService.create_patient(record=record)
        except DatabaseError as e:
            raise _internal("create a patient", e)

        return Response({"id": patient_id}, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=PatientPayloadSerializer,
        responses={200: PatientIdSerializer},
        tags=["Patients"],
        operation_id="v1_patients_update",
    )
    def update(self, request, pk=None):
        patient_id = int(pk)
        if patient_id == 0:
            raise DRFValidationError(["id has to be a non-zero integer"])

        body_id = request.data.get("id") if hasattr(request.data, "get") else None
        if body_id not in (None, "", 0) and str(body_id) != str(patient_id):
            raise DRFValidationError(["id in the body does not match the id in the path"])

        record = self._record_from_request(request, patient_id=patient_id)

        try:
            PatientService.update_patient(record=record)
        except DjangoValidationError as e:
            raise _invalid_argument(e)
        except PatientNotFound:
            raise NotFound(PATIENT_NOT_FOUND_MSG)
        except DatabaseError as e:
            raise _internal("update a patient", e)

        return Response({"id": patient_id}, status=status.HTTP_200_OK)

    @extend_schema(responses={204: None}, tags=["Patients"], operation_id="v1_patients_destroy")
    def destroy(self, request, pk=None):
        try:
            PatientService.delete_patient(patient_id=int(pk))
        except PatientNotFound:
            raise NotFound(PATIENT_NOT_FOUND_MSG)
        except DatabaseError as e:
            raise _internal("delete a patient", e)

        return Response(status=status.HTTP_204_NO_CONTENT)

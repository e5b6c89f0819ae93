"""
Credentials API views.

Endpoints (under /api/v1/credentials/):
    services/   - GET, catalog with stock counts (public)
    generate/   - POST {"service": ...}, pop a credential for the caller
    history/    - GET ?limit=, caller's generations, newest first
    stats/      - GET, caller's usage counters and last 5 generations
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from core.views import invalid_request_response, result_response

from credentials.serializers import (
    GenerateRequestSerializer,
    GenerationEventSerializer,
    ServiceEntrySerializer,
    UsageStatsSerializer,
)
from credentials.services import CredentialAllocator, ServiceCatalog


class ServiceListView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        summary="List services",
        tags=["Credentials"],
        responses={200: ServiceEntrySerializer(many=True)},
    )
    def get(self, request):
        return result_response(ServiceCatalog.list_services())


class GenerateView(APIView):
    """
    POST /api/v1/credentials/generate/

    Responses:
        201: {"success": true, "data": {id, service, account, generated_at}}
        400: blank or invalid service
        404: service out of stock
        500: pool failure; if the account was already taken from the pool it
             is included under "data"
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Generate an account",
        tags=["Credentials"],
        request=GenerateRequestSerializer,
        responses={201: GenerationEventSerializer},
    )
    def post(self, request):
        serializer = GenerateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        result = CredentialAllocator.generate(
            request.user, serializer.validated_data["service"]
        )
        if not result:
            return result_response(result)
        return result_response(
            result,
            success_status=status.HTTP_201_CREATED,
            data=GenerationEventSerializer(result.data).data,
        )


class HistoryView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Generation history",
        tags=["Credentials"],
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: GenerationEventSerializer(many=True)},
    )
    def get(self, request):
        result = CredentialAllocator.history(
            request.user, request.query_params.get("limit")
        )
        if not result:
            return result_response(result)
        return result_response(
            result, data=GenerationEventSerializer(result.data, many=True).data
        )


class StatsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Usage statistics",
        tags=["Credentials"],
        responses={200: UsageStatsSerializer},
    )
    def get(self, request):
        result = CredentialAllocator.stats(request.user)
        return result_response(result, data=UsageStatsSerializer(result.data).data)

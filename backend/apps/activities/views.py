# apps/activities/views.py

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Activity
from .selectors import search_activities
from .serializers import ActivitySerializer
from .services import complete_activity


class ActivityViewSet(viewsets.ReadOnlyModelViewSet):
    """
    list:      GET   /api/v1/activities/?lead=&status=&type=
    retrieve:  GET   /api/v1/activities/{id}/
    complete:  POST  /api/v1/activities/{id}/complete/
    """

    queryset = Activity.objects.select_related("lead", "user").order_by("-created_at")
    serializer_class = ActivitySerializer

    def get_queryset(self):
        if self.action != "list":
            return super().get_queryset()
        params = self.request.query_params
        return search_activities(
            lead_id=params.get("lead"),
            status=params.get("status"),
            type=params.get("type"),
        )

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        activity = self.get_object()
        if not activity.is_open:
            return Response(
                {"error": f"Activity is already {activity.status}"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        complete_activity(activity)
        return Response(ActivitySerializer(activity).data)

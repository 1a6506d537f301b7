from pathlib import Path

from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from apps.common.views import live_health, ready_health

urlpatterns = [
    path("api/", include("apps.api.urls")),
    path("health/live", live_health, name="health-live"),
    path("health/ready", ready_health, name="health-ready"),
]

# DEBUG serves the live schema; otherwise a pre-generated file under static/schema.
if settings.DEBUG:
    urlpatterns += [
        path("schema/", SpectacularAPIView.as_view(), name="schema"),
        path(
            "docs/swagger/",
            SpectacularSwaggerView.as_view(url_name="schema"),
            name="swagger-ui",
        ),
        path(
            "docs/redoc/",
            SpectacularRedocView.as_view(url_name="schema"),
            name="redoc",
        ),
    ]
else:
    def _static_schema_response(request):  # pragma: no cover (simple IO)
        file_path = Path(settings.BASE_DIR) / "static" / settings.OPENAPI_STATIC_JSON
        if not file_path.exists():
            return JsonResponse(
                {
                    "error": "schema_not_found",
                    "message": "Static schema not found. Run `manage.py spectacular` or enable DEBUG.",
                },
                status=404,
            )
        return HttpResponse(file_path.read_text(), content_type="application/json")

    urlpatterns += [
        path("schema/", _static_schema_response, name="schema-json"),
        path(
            "docs/swagger/",
            SpectacularSwaggerView.as_view(url_name="schema-json"),
            name="swagger-ui",
        ),
        path(
            "docs/redoc/",
            SpectacularRedocView.as_view(url_name="schema-json"),
            name="redoc",
        ),
    ]

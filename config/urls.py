"""
URL configuration for studio-ledger project
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.generic import RedirectView
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
)
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from reports.views import dashboard_view


@require_http_methods(["GET"])
def health_view(request):
    """Minimal health check for connectivity verification. No auth required."""
    return JsonResponse({'status': 'ok', 'service': 'studio-ledger'})


@require_http_methods(["GET"])
def api_root(request):
    """Root endpoint - API information"""
    return JsonResponse({
        'name': 'Studio Ledger API',
        'version': '1.0.0',
        'description': 'Dance studio enrollment, billing and reporting API',
        'endpoints': {
            'health': '/api/health/',
            'auth': '/api/auth/token/',
            'students': '/api/students/',
            'classes': '/api/classes/',
            'enrollments': '/api/enrollments/',
            'teachers': '/api/teachers/',
            'payments': '/api/payments/',
            'reports': '/api/reports/',
            'dashboard': '/api/dashboard/',
            'docs': '/api/docs/',
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/', api_root),
    path('api/health/', health_view, name='api-health'),

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # Auth (JWT)
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # API endpoints
    path('api/students/', include('students.urls')),
    path('api/classes/', include('classes.urls')),
    path('api/enrollments/', include('classes.urls_enrollments')),
    path('api/teachers/', include('teachers.urls')),
    path('api/payments/', include('payments.urls')),
    path('api/reports/', include('reports.urls')),
    path('api/dashboard/', dashboard_view, name='dashboard'),
]

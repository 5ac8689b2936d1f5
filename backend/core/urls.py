"""
URL configuration for the carbon ledger backend.
"""

from django.contrib import admin
from django.urls import include, path

from common.views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health_check, name='health_check'),
    path('api/ledger/', include('carbon_ledger.urls')),
]

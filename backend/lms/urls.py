from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path

urlpatterns = [
    path('favicon.ico', lambda request: HttpResponse(status=204), name='favicon'),
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/registrations/', include('registrations.urls')),
    path('api/resources/', include('resources.urls')),
]

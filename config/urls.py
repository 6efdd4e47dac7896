from django.contrib import admin
from django.urls import path, include

# Main URL Configuration
# Routes all requests to appropriate apps

urlpatterns = [

    path('admin/', admin.site.urls),
    path('leads/', include('apps.leads.urls')),

]

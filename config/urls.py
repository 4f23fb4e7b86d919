"""
URL configuration for the Cabin Rentals project.
"""

from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Cabin Rentals Admin"
admin.site.site_title = "Admin Portal"
admin.site.index_title = "Locations, cabins and bookings"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('cabins.urls')),
]

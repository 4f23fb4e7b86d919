"""
URL configuration package.

Combines the availability, pricing and booking URL patterns into a single
urlpatterns list under the 'cabins' namespace.
"""

from .availability import urlpatterns as availability_urls
from .pricing import urlpatterns as pricing_urls
from .bookings import urlpatterns as booking_urls

app_name = 'cabins'

urlpatterns = (
    availability_urls
    + pricing_urls
    + booking_urls
)

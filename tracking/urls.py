from django.urls import path
from . import views

app_name = 'tracking'

urlpatterns = [
    # Storefront events
    path('add-to-cart/', views.track_add_to_cart, name='add_to_cart'),
    path('search/', views.track_search, name='search'),
    path('checkout/', views.track_checkout, name='checkout'),

    # Staff diagnostics
    path('admin/test-connection/', views.connection_test, name='test_connection'),
    path('admin/test-event/', views.test_event, name='test_event'),
    path('admin/stats/', views.api_stats, name='api_stats'),
]

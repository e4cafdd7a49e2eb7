from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('appointments/', views.appointments, name='appointments'),
    path('appointments/<int:appointment_id>/', views.appointment_delete, name='appointment_delete'),
    path('salon-settings/', views.salon_settings, name='salon_settings'),
]

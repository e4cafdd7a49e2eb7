from django.urls import path
from . import views

app_name = 'booking'

urlpatterns = [
	path('appointments/', views.appointments, name='appointments'),
	path('appointments/<int:appointment_id>/', views.appointment_detail, name='appointment_detail'),
	path('appointments/<int:appointment_id>/reschedule/', views.reschedule, name='reschedule'),
	path('services/', views.service_catalog, name='services'),
]

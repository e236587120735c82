from django.urls import path
from . import views

app_name = 'workspace'

urlpatterns = [
    path('', views.snapshot, name='snapshot'),
    path('refresh/', views.refresh, name='refresh'),
]

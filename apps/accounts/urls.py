from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),

    # Account and profile
    path('user/', views.get_current_user, name='current-user'),
    path('profile/', views.profile, name='profile'),
    path('profile/notifications/', views.notifications, name='notifications'),
]

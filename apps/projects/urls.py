from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'projects'

router = DefaultRouter()
router.register(r'', views.ProjectViewSet, basename='project')

urlpatterns = [
    # GET    /api/projects/                   - List projects
    # POST   /api/projects/                   - Create project
    # GET    /api/projects/{id}/              - Get project
    # PATCH  /api/projects/{id}/              - Edit project
    # DELETE /api/projects/{id}/              - Delete project (409 while invoiced)
    # GET    /api/projects/{id}/budget/       - Budget summary
    # GET    /api/projects/{id}/po_options/   - PO default and choices
    path('', include(router.urls)),
]

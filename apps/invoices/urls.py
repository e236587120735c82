from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'invoices'

router = DefaultRouter()
router.register(r'', views.InvoiceViewSet, basename='invoice')

urlpatterns = [
    # GET    /api/invoices/                - List invoices
    # POST   /api/invoices/                - Create client invoice
    # POST   /api/invoices/third_party/    - Create third-party invoice
    # GET    /api/invoices/{id}/           - Get invoice
    # PATCH  /api/invoices/{id}/           - Edit invoice
    # DELETE /api/invoices/{id}/           - Delete invoice
    # POST   /api/invoices/{id}/status/    - Change status
    path('', include(router.urls)),
]

"""
URL configuration for credentials app.
"""

from django.urls import path

from credentials.views import GenerateView, HistoryView, ServiceListView, StatsView

app_name = "credentials"

urlpatterns = [
    path("services/", ServiceListView.as_view(), name="services"),
    path("generate/", GenerateView.as_view(), name="generate"),
    path("history/", HistoryView.as_view(), name="history"),
    path("stats/", StatsView.as_view(), name="stats"),
]

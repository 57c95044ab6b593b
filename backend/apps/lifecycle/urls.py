# apps/lifecycle/urls.py

from django.urls import path

from . import views

urlpatterns = [
    path("sweep/", views.sweep, name="lifecycle-sweep"),
    path("follow-up-rules/", views.follow_up_rules, name="lifecycle-follow-up-rules"),
]

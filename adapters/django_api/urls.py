"""
Storefront Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("categories", views.categories_view),
    path("categories/<uuid:category_id>", views.category_detail_view),
    path("books", views.books_view),
    path("books/<uuid:book_id>", views.book_detail_view),
    path("books/<uuid:book_id>/reviews", views.book_reviews_view),
    path("reviews/<uuid:review_id>", views.review_detail_view),
    path("cart", views.cart_view),
    path("cart/<uuid:cart_item_id>", views.cart_item_view),
    path("orders", views.orders_view),
    path("orders/<uuid:order_id>", views.order_detail_view),
    path("orders/<uuid:order_id>/items", views.order_items_view),
    path("orders/<uuid:order_id>/status", views.order_status_view),
    path("profile", views.profile_view),
    path("admin/principals", views.principals_view),
    path("admin/principals/<str:principal_id>/block", views.principal_block_view),
    path("admin/principals/<str:principal_id>/role", views.principal_role_view),
]

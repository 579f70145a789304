import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("core_identity_store", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255, unique=True)),
                ("description", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "storefront_categories",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Book",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("author", models.CharField(max_length=255)),
                ("isbn", models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ("description", models.TextField(blank=True, null=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("original_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("image_url", models.TextField(blank=True, null=True)),
                ("stock_quantity", models.IntegerField(default=0)),
                ("rating", models.DecimalField(decimal_places=1, default=0, max_digits=2)),
                ("review_count", models.IntegerField(default=0)),
                ("is_featured", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=models.deletion.SET_NULL,
                        related_name="books",
                        to="core_catalog_store.category",
                    ),
                ),
            ],
            options={
                "db_table": "storefront_books",
                "ordering": ["title", "id"],
                "indexes": [
                    models.Index(fields=["category"], name="idx_book_category"),
                    models.Index(fields=["is_featured"], name="idx_book_featured"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Review",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("rating", models.IntegerField()),
                ("comment", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "book",
                    models.ForeignKey(
                        on_delete=models.deletion.CASCADE,
                        related_name="reviews",
                        to="core_catalog_store.book",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        db_column="user_id",
                        on_delete=models.deletion.CASCADE,
                        related_name="reviews",
                        to="core_identity_store.principal",
                    ),
                ),
            ],
            options={
                "db_table": "storefront_reviews",
                "ordering": ["-created_at", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=["owner", "book"], name="uq_review_owner_book"),
                    models.CheckConstraint(
                        condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                        name="ck_review_rating_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CartItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("quantity", models.IntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "book",
                    models.ForeignKey(
                        on_delete=models.deletion.CASCADE,
                        related_name="cart_items",
                        to="core_catalog_store.book",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        db_column="user_id",
                        on_delete=models.deletion.CASCADE,
                        related_name="cart_items",
                        to="core_identity_store.principal",
                    ),
                ),
            ],
            options={
                "db_table": "storefront_cart_items",
                "ordering": ["created_at", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=["owner", "book"], name="uq_cart_owner_book"),
                ],
            },
        ),
    ]

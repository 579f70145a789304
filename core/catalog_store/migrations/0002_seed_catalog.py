from decimal import Decimal

from django.db import migrations

SEED_CATEGORIES = (
    ("Fiction", "Novels, short stories, and other fictional works"),
    ("Non-Fiction", "Biographies, memoirs, and factual books"),
    ("Science & Technology", "Books about science, technology, and innovation"),
    ("Business", "Business, entrepreneurship, and management books"),
    ("Self-Help", "Personal development and self-improvement books"),
    ("History", "Historical books and documentaries"),
    ("Romance", "Romantic novels and love stories"),
    ("Mystery & Thriller", "Mystery, thriller, and suspense novels"),
    ("Fantasy & Sci-Fi", "Fantasy and science fiction books"),
    ("Cooking", "Cookbooks and culinary guides"),
)

# (title, author, price, original_price, category, stock, rating, reviews, featured, description)
SEED_BOOKS = (
    ("The Great Adventure", "John Smith", "19.99", "24.99", "Fiction", 50, "4", 128, True,
     "An epic tale of adventure and discovery that will keep you on the edge of your seat."),
    ("Digital Marketing Mastery", "Emma Wilson", "29.99", None, "Business", 30, "5", 89, False,
     "Learn the secrets of successful digital marketing in the modern age."),
    ("Mystery of the Lost City", "Robert Brown", "16.99", "21.99", "Mystery & Thriller", 25, "4", 203, True,
     "A thrilling mystery that takes you through ancient civilizations and modern conspiracies."),
    ("Cooking with Love", "Maria Garcia", "34.99", None, "Cooking", 40, "5", 156, False,
     "Delicious recipes and cooking techniques from around the world."),
    ("Future Technologies", "Dr. Alex Chen", "39.99", None, "Science & Technology", 20, "4", 67, False,
     "Explore the cutting-edge technologies that will shape our future."),
    ("The Art of Mindfulness", "Lisa Johnson", "22.99", None, "Self-Help", 35, "5", 234, True,
     "Discover inner peace and mindfulness in our fast-paced world."),
    ("World History Chronicles", "Prof. David Lee", "44.99", None, "History", 15, "4", 92, False,
     "A comprehensive journey through the most important events in world history."),
    ("Romance in Paris", "Sophie Martin", "18.99", None, "Romance", 60, "4", 178, False,
     "A heartwarming love story set in the beautiful city of Paris."),
)


def seed_catalog(apps, schema_editor):
    Category = apps.get_model("core_catalog_store", "Category")
    Book = apps.get_model("core_catalog_store", "Book")

    categories = {}
    for name, description in SEED_CATEGORIES:
        category, _ = Category.objects.get_or_create(
            name=name,
            defaults={"description": description},
        )
        categories[name] = category

    for (
        title,
        author,
        price,
        original_price,
        category_name,
        stock,
        rating,
        review_count,
        featured,
        description,
    ) in SEED_BOOKS:
        if Book.objects.filter(title=title, author=author).exists():
            continue
        Book.objects.create(
            title=title,
            author=author,
            price=Decimal(price),
            original_price=Decimal(original_price) if original_price else None,
            category=categories[category_name],
            stock_quantity=stock,
            rating=Decimal(rating),
            review_count=review_count,
            is_featured=featured,
            description=description,
        )


def unseed_catalog(apps, schema_editor):
    Category = apps.get_model("core_catalog_store", "Category")
    Book = apps.get_model("core_catalog_store", "Book")
    Book.objects.filter(title__in=[row[0] for row in SEED_BOOKS]).delete()
    Category.objects.filter(name__in=[row[0] for row in SEED_CATEGORIES]).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("core_catalog_store", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_catalog, unseed_catalog),
    ]

"""Management command to seed a demo flooring catalog."""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.catalog.constants import UNIT_PACK, UNIT_PIECE, VALUE_TYPE_FREE_TEXT, VALUE_TYPE_STANDARDIZED
from apps.catalog.models import (
    AttributeValue,
    Brand,
    Category,
    Collection,
    Product,
    ProductAttribute,
    StoreLocation,
)
from apps.catalog.services import ProductService


CATEGORIES = [
    # (name, slug, parent slug)
    ('Напольные покрытия', 'napolnye-pokrytiya', None),
    ('Ламинат', 'laminat', 'napolnye-pokrytiya'),
    ('Кварцвинил', 'kvartsvinil', 'napolnye-pokrytiya'),
    ('Паркетная доска', 'parketnaya-doska', 'napolnye-pokrytiya'),
    ('Плинтусы', 'plintusy', None),
]

BRANDS = [
    # (name, slug, country, collections)
    ('Tarkett', 'tarkett', 'RU', [('Estetica', 'tarkett-estetica')]),
    ('Quick-Step', 'quick-step', 'OTHER', [('Impressive', 'quick-step-impressive')]),
    ('Alpine Floor', 'alpine-floor', 'RU', [('Grand Sequoia', 'alpine-grand-sequoia')]),
]

ATTRIBUTES = [
    # (name, slug, value type, values)
    ('Класс износостойкости', 'wear-class', VALUE_TYPE_STANDARDIZED, ['32', '33', '34', '43']),
    ('Толщина (мм)', 'thickness', VALUE_TYPE_STANDARDIZED, ['4', '8', '10', '12']),
    ('Цвет', 'color', VALUE_TYPE_STANDARDIZED, ['Дуб светлый', 'Дуб серый', 'Орех']),
    ('Длина (см)', 'length', VALUE_TYPE_FREE_TEXT, []),
]

STORE_LOCATIONS = [
    ('ул. Ленина, 10', 'Пн-Сб 9:00-19:00'),
    ('пр. Мира, 45', 'Ежедневно 10:00-20:00'),
]

PRODUCTS = [
    {
        'name': 'Ламинат Tarkett Estetica Дуб натур',
        'slug': 'tarkett-estetica-dub-natur',
        'sku': 'TRK-EST-01',
        'category': 'laminat',
        'brand': 'tarkett',
        'collection': 'tarkett-estetica',
        'price': '1290.00',
        'square_meters_per_pack': '2.131',
        'unit_of_measurement': UNIT_PACK,
        'is_featured': True,
        'tags': ['living-room', 'bedroom'],
        'attributes': [
            {'attributeId': 'wear-class', 'value': '33'},
            {'attributeId': 'thickness', 'value': '8'},
            {'attributeId': 'color', 'value': 'Дуб светлый'},
        ],
    },
    {
        'name': 'Ламинат Quick-Step Impressive',
        'slug': 'quick-step-impressive',
        'sku': 'QS-IMP',
        'category': 'laminat',
        'brand': 'quick-step',
        'collection': 'quick-step-impressive',
        'price': '2150.00',
        'discount': 10,
        'unit_of_measurement': UNIT_PACK,
        'tags': ['kitchen', 'waterproof'],
        'attributes': [
            {'attributeId': 'wear-class', 'value': '32'},
            {'attributeId': 'color', 'value': 'Дуб серый,Орех'},
        ],
        'has_variations': True,
        'variations': [
            {'sku': 'QS-IMP-8', 'price': '2150.00', 'attributes': [{'attributeId': 'thickness', 'value': '8'}]},
            {'sku': 'QS-IMP-12', 'price': '2590.00', 'attributes': [{'attributeId': 'thickness', 'value': '12'}]},
        ],
    },
    {
        'name': 'Кварцвинил Alpine Floor Grand Sequoia',
        'slug': 'alpine-grand-sequoia',
        'category': 'kvartsvinil',
        'brand': 'alpine-floor',
        'collection': 'alpine-grand-sequoia',
        'price': '2890.00',
        'unit_of_measurement': UNIT_PACK,
        'is_featured': True,
        'tags': ['bathroom', 'waterproof'],
        'attributes': [
            {'attributeId': 'wear-class', 'value': '43'},
            {'attributeId': 'thickness', 'value': '4'},
        ],
    },
    {
        'name': 'Плинтус МДФ белый',
        'slug': 'plintus-mdf-belyi',
        'category': 'plintusy',
        'price': '450.00',
        'unit_of_measurement': UNIT_PIECE,
        'attributes': [{'attributeId': 'length', 'value': '240'}],
    },
]


class Command(BaseCommand):
    help = "Seed a demo catalog: categories, brands, attributes, stores and products"

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Recreate products that already exist",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Creating categories...")
        for name, slug, parent_slug in CATEGORIES:
            parent = Category.objects.get(slug=parent_slug) if parent_slug else None
            Category.objects.get_or_create(slug=slug, defaults={'name': name, 'parent': parent})

        self.stdout.write("Creating brands and collections...")
        for name, slug, country, collections in BRANDS:
            brand, _ = Brand.objects.get_or_create(slug=slug, defaults={'name': name, 'country': country})
            for collection_name, collection_slug in collections:
                Collection.objects.get_or_create(
                    slug=collection_slug,
                    defaults={'name': collection_name, 'brand': brand},
                )

        self.stdout.write("Creating attributes...")
        for name, slug, value_type, values in ATTRIBUTES:
            attribute, _ = ProductAttribute.objects.get_or_create(
                slug=slug,
                defaults={'name': name, 'value_type': value_type},
            )
            for i, value in enumerate(values):
                AttributeValue.objects.get_or_create(
                    attribute=attribute,
                    value=value,
                    defaults={'sort_order': i},
                )

        self.stdout.write("Creating store locations...")
        locations = []
        for i, (address, hours) in enumerate(STORE_LOCATIONS):
            location, _ = StoreLocation.objects.get_or_create(
                address=address,
                defaults={'opening_hours': hours, 'order': i},
            )
            locations.append(location.pk)

        self.stdout.write("Creating products...")
        for data in PRODUCTS:
            existing = Product.objects.filter(slug=data['slug']).first()
            if existing:
                if not options["force"]:
                    self.stdout.write(f"  Skipping existing product: {data['name']}")
                    continue
                ProductService.delete_product(existing.pk)

            ProductService.create_product({**data, 'store_location_ids': locations})
            self.stdout.write(self.style.SUCCESS(f"  Created: {data['name']}"))

        self.stdout.write(self.style.SUCCESS(
            f"\nCatalog seeded: {Product.objects.count()} products, "
            f"{Category.objects.count()} categories, "
            f"{ProductAttribute.objects.count()} attributes"
        ))

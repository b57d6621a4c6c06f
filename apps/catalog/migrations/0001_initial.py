# Generated manually

from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import simple_history.models


UNIT_CHOICES = [
    ('погонный метр', 'Погонный метр'),
    ('квадратный метр', 'Квадратный метр'),
    ('литр', 'Литр'),
    ('штука', 'Штука'),
    ('упаковка', 'Упаковка'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Название')),
                ('slug', models.SlugField(allow_unicode=True, max_length=200, unique=True, verbose_name='Slug')),
                ('image', models.CharField(blank=True, help_text='Путь к файлу в хранилище', max_length=500, verbose_name='Изображение')),
                ('is_active', models.BooleanField(default=True, verbose_name='Активна')),
                ('order', models.PositiveIntegerField(default=0, verbose_name='Порядок')),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='catalog.category', verbose_name='Родительская категория')),
            ],
            options={
                'verbose_name': 'Категория',
                'verbose_name_plural': 'Категории',
                'ordering': ['order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Brand',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Название')),
                ('slug', models.SlugField(allow_unicode=True, max_length=200, unique=True, verbose_name='Slug')),
                ('image', models.CharField(blank=True, help_text='Путь к файлу в хранилище', max_length=500, verbose_name='Логотип')),
                ('country', models.CharField(choices=[('NONE', 'Не указано'), ('RU', 'Россия'), ('DE', 'Германия'), ('IT', 'Италия'), ('FR', 'Франция'), ('ES', 'Испания'), ('OTHER', 'Другое')], default='NONE', max_length=10, verbose_name='Страна')),
                ('is_active', models.BooleanField(default=True, verbose_name='Активен')),
            ],
            options={
                'verbose_name': 'Бренд',
                'verbose_name_plural': 'Бренды',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Collection',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Название')),
                ('slug', models.SlugField(allow_unicode=True, max_length=200, unique=True, verbose_name='Slug')),
                ('is_active', models.BooleanField(default=True, verbose_name='Активна')),
                ('brand', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='collections', to='catalog.brand', verbose_name='Бренд')),
            ],
            options={
                'verbose_name': 'Коллекция',
                'verbose_name_plural': 'Коллекции',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ProductAttribute',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Название')),
                ('slug', models.SlugField(allow_unicode=True, max_length=100, unique=True, verbose_name='Slug')),
                ('value_type', models.CharField(choices=[('free-text', 'Свободный текст'), ('standardized', 'Стандартизированные значения'), ('both', 'Оба варианта')], default='free-text', max_length=20, verbose_name='Тип значений')),
                ('allow_multiple_values', models.BooleanField(default=False, verbose_name='Несколько значений')),
            ],
            options={
                'verbose_name': 'Атрибут',
                'verbose_name_plural': 'Атрибуты',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='AttributeValue',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('value', models.CharField(max_length=200, verbose_name='Значение')),
                ('slug', models.SlugField(allow_unicode=True, blank=True, max_length=200, verbose_name='Slug')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='Порядок')),
                ('is_active', models.BooleanField(default=True, verbose_name='Активно')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Создано')),
                ('attribute', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='values', to='catalog.productattribute', verbose_name='Атрибут')),
            ],
            options={
                'verbose_name': 'Значение атрибута',
                'verbose_name_plural': 'Значения атрибутов',
                'ordering': ['sort_order', 'value'],
                'unique_together': {('attribute', 'value')},
            },
        ),
        migrations.CreateModel(
            name='StoreLocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('address', models.CharField(max_length=255, verbose_name='Адрес')),
                ('description', models.TextField(blank=True, help_text='Например: "Вход со стороны дороги"', verbose_name='Описание')),
                ('opening_hours', models.TextField(blank=True, verbose_name='Часы работы')),
                ('is_active', models.BooleanField(default=True, verbose_name='Активен')),
                ('order', models.PositiveIntegerField(default=0, verbose_name='Порядок')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Создан')),
            ],
            options={
                'verbose_name': 'Магазин',
                'verbose_name_plural': 'Магазины',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Название')),
                ('slug', models.SlugField(allow_unicode=True, max_length=255, unique=True, verbose_name='Slug')),
                ('sku', models.CharField(blank=True, max_length=100, verbose_name='Артикул')),
                ('images', models.JSONField(blank=True, default=list, help_text='Список путей к файлам в хранилище', verbose_name='Изображения')),
                ('description', models.TextField(blank=True, verbose_name='Описание')),
                ('important_note', models.TextField(blank=True, help_text='Поддерживает Markdown', verbose_name='Важная заметка')),
                ('tags', models.JSONField(blank=True, default=list, verbose_name='Теги')),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Цена')),
                ('discount', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MaxValueValidator(100)], verbose_name='Скидка (%)')),
                ('square_meters_per_pack', models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True, verbose_name='м² в упаковке')),
                ('unit_of_measurement', models.CharField(choices=UNIT_CHOICES, default='упаковка', max_length=50, verbose_name='Единица измерения')),
                ('is_active', models.BooleanField(default=True, verbose_name='Активен')),
                ('is_featured', models.BooleanField(default=False, verbose_name='Рекомендуемый')),
                ('has_variations', models.BooleanField(default=False, verbose_name='Есть вариации')),
                ('product_attributes', models.JSONField(blank=True, default=list, help_text='[{"attributeId": "5", "value": "Дерево"}]', verbose_name='Атрибуты')),
                ('dimensions', models.TextField(blank=True, verbose_name='Габариты')),
                ('view_count', models.PositiveIntegerField(default=0, verbose_name='Просмотры')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Создан')),
                ('brand', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='products', to='catalog.brand', verbose_name='Бренд')),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='products', to='catalog.category', verbose_name='Категория')),
                ('collection', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='products', to='catalog.collection', verbose_name='Коллекция')),
            ],
            options={
                'verbose_name': 'Товар',
                'verbose_name_plural': 'Товары',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ProductStoreLocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='catalog.product', verbose_name='Товар')),
                ('store_location', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='catalog.storelocation', verbose_name='Магазин')),
            ],
            options={
                'verbose_name': 'Наличие в магазине',
                'verbose_name_plural': 'Наличие в магазинах',
                'unique_together': {('product', 'store_location')},
            },
        ),
        migrations.AddField(
            model_name='product',
            name='store_locations',
            field=models.ManyToManyField(blank=True, related_name='products', through='catalog.ProductStoreLocation', to='catalog.storelocation', verbose_name='Магазины'),
        ),
        migrations.CreateModel(
            name='ProductAttributeValue',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('attribute', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_values', to='catalog.productattribute', verbose_name='Атрибут')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attribute_values', to='catalog.product', verbose_name='Товар')),
                ('value', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_values', to='catalog.attributevalue', verbose_name='Значение')),
            ],
            options={
                'verbose_name': 'Значение атрибута товара',
                'verbose_name_plural': 'Значения атрибутов товаров',
                'indexes': [
                    models.Index(fields=['product', 'attribute'], name='catalog_pav_product_idx'),
                    models.Index(fields=['attribute', 'value'], name='catalog_pav_attr_value_idx'),
                ],
                'unique_together': {('product', 'attribute', 'value')},
            },
        ),
        migrations.CreateModel(
            name='ProductVariation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=100, unique=True, verbose_name='Артикул')),
                ('price', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Цена')),
                ('discount', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MaxValueValidator(100)], verbose_name='Скидка (%)')),
                ('sort', models.IntegerField(default=0, verbose_name='Порядок')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Создана')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variations', to='catalog.product', verbose_name='Товар')),
            ],
            options={
                'verbose_name': 'Вариация',
                'verbose_name_plural': 'Вариации',
                'ordering': ['sort', 'id'],
            },
        ),
        migrations.CreateModel(
            name='VariationAttribute',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('attribute_id', models.CharField(max_length=100, verbose_name='Атрибут')),
                ('value', models.CharField(max_length=200, verbose_name='Значение')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('variation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attributes', to='catalog.productvariation', verbose_name='Вариация')),
            ],
            options={
                'verbose_name': 'Атрибут вариации',
                'verbose_name_plural': 'Атрибуты вариаций',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalProduct',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Название')),
                ('slug', models.SlugField(allow_unicode=True, max_length=255, verbose_name='Slug')),
                ('sku', models.CharField(blank=True, max_length=100, verbose_name='Артикул')),
                ('images', models.JSONField(blank=True, default=list, help_text='Список путей к файлам в хранилище', verbose_name='Изображения')),
                ('description', models.TextField(blank=True, verbose_name='Описание')),
                ('important_note', models.TextField(blank=True, help_text='Поддерживает Markdown', verbose_name='Важная заметка')),
                ('tags', models.JSONField(blank=True, default=list, verbose_name='Теги')),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Цена')),
                ('discount', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MaxValueValidator(100)], verbose_name='Скидка (%)')),
                ('square_meters_per_pack', models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True, verbose_name='м² в упаковке')),
                ('unit_of_measurement', models.CharField(choices=UNIT_CHOICES, default='упаковка', max_length=50, verbose_name='Единица измерения')),
                ('is_active', models.BooleanField(default=True, verbose_name='Активен')),
                ('is_featured', models.BooleanField(default=False, verbose_name='Рекомендуемый')),
                ('has_variations', models.BooleanField(default=False, verbose_name='Есть вариации')),
                ('product_attributes', models.JSONField(blank=True, default=list, help_text='[{"attributeId": "5", "value": "Дерево"}]', verbose_name='Атрибуты')),
                ('dimensions', models.TextField(blank=True, verbose_name='Габариты')),
                ('view_count', models.PositiveIntegerField(default=0, verbose_name='Просмотры')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Создан')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('brand', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalog.brand', verbose_name='Бренд')),
                ('category', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalog.category', verbose_name='Категория')),
                ('collection', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalog.collection', verbose_name='Коллекция')),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Товар',
                'verbose_name_plural': 'historical Товары',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]

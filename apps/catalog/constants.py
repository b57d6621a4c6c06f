"""Fixed vocabularies of the catalog."""

UNIT_LINEAR_METER = 'погонный метр'
UNIT_SQUARE_METER = 'квадратный метр'
UNIT_LITER = 'литр'
UNIT_PIECE = 'штука'
UNIT_PACK = 'упаковка'

UNIT_OF_MEASUREMENT_CHOICES = [
    (UNIT_LINEAR_METER, 'Погонный метр'),
    (UNIT_SQUARE_METER, 'Квадратный метр'),
    (UNIT_LITER, 'Литр'),
    (UNIT_PIECE, 'Штука'),
    (UNIT_PACK, 'Упаковка'),
]

PRODUCT_TAG_CHOICES = [
    ('kitchen', 'Кухня'),
    ('living-room', 'Гостиная'),
    ('bedroom', 'Спальня'),
    ('bathroom', 'Ванная'),
    ('hallway', 'Прихожая'),
    ('balcony', 'Балкон'),
    ('commercial', 'Коммерческие помещения'),
    ('outdoor', 'Уличное использование'),
    ('waterproof', 'Водостойкие'),
]
PRODUCT_TAGS = [code for code, _ in PRODUCT_TAG_CHOICES]

BRAND_COUNTRY_CHOICES = [
    ('NONE', 'Не указано'),
    ('RU', 'Россия'),
    ('DE', 'Германия'),
    ('IT', 'Италия'),
    ('FR', 'Франция'),
    ('ES', 'Испания'),
    ('OTHER', 'Другое'),
]

VALUE_TYPE_FREE_TEXT = 'free-text'
VALUE_TYPE_STANDARDIZED = 'standardized'
VALUE_TYPE_BOTH = 'both'

VALUE_TYPE_CHOICES = [
    (VALUE_TYPE_FREE_TEXT, 'Свободный текст'),
    (VALUE_TYPE_STANDARDIZED, 'Стандартизированные значения'),
    (VALUE_TYPE_BOTH, 'Оба варианта'),
]
STANDARDIZED_VALUE_TYPES = (VALUE_TYPE_STANDARDIZED, VALUE_TYPE_BOTH)

PRODUCT_SORT_CHOICES = [
    ('relevant', 'По релевантности'),
    ('name', 'По названию'),
    ('price-asc', 'Сначала дешевле'),
    ('price-desc', 'Сначала дороже'),
    ('newest', 'Сначала новые'),
    ('oldest', 'Сначала старые'),
]

MIN_SEARCH_LENGTH = 2

"""
Dashboard product writes: create, update with variation reconciliation,
delete. Images are moved out of staging before the database work.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Set

from django.db import IntegrityError, transaction

from apps.catalog.constants import UNIT_OF_MEASUREMENT_CHOICES
from apps.catalog.exceptions import (
    AttributeValidationFailed,
    EntityConflict,
    EntityNotFound,
    InvalidInput,
)
from apps.catalog.models import (
    Brand,
    Category,
    Collection,
    Product,
    ProductStoreLocation,
    ProductVariation,
    StoreLocation,
    VariationAttribute,
)
from apps.catalog.services.attributes import AttributeService
from apps.catalog.services.images import ProductImageService, parse_image_list

logger = logging.getLogger(__name__)

UNITS = [code for code, _ in UNIT_OF_MEASUREMENT_CHOICES]


def _clean_attributes(attributes) -> List[Dict]:
    """Keep entries with a non-empty value, as [{"attributeId", "value"}]."""
    cleaned = []
    for attr in attributes or []:
        attribute_id = str(attr.get('attributeId', '') or '').strip()
        value = str(attr.get('value', '') or '').strip()
        if attribute_id and value:
            cleaned.append({'attributeId': attribute_id, 'value': value})
    return cleaned


def _to_decimal(value, field):
    if value is None or value == '':
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInput(f'{field} must be a number')


def _to_discount(value, field='Discount'):
    if value is None or value == '':
        return None
    try:
        discount = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f'{field} must be an integer')
    if discount < 0 or discount > 100:
        raise InvalidInput(f'{field} must be between 0 and 100')
    return discount


class ProductService:
    """Create, update and delete products from dashboard input."""

    # -------------------------------------------------------------------------
    # Input helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _resolve_related(model, slug, label, existing=None):
        """
        Resolve a related object by slug.
        "" keeps the existing object; None clears it.
        """
        if slug is None:
            return None
        slug = str(slug).strip()
        if slug == '':
            return existing
        try:
            return model.objects.get(slug=slug)
        except model.DoesNotExist:
            raise InvalidInput(f'{label} "{slug}" not found')

    @staticmethod
    def _validate_required(data: Dict):
        price = data.get('price')
        if not data.get('name') or not data.get('slug') or price is None or price == '':
            raise InvalidInput('Missing required fields: name, slug, and price are required')
        if not data.get('unit_of_measurement'):
            raise InvalidInput('Unit of measurement is required')
        if data['unit_of_measurement'] not in UNITS:
            raise InvalidInput(f'Unknown unit of measurement: {data["unit_of_measurement"]}')

        price = _to_decimal(price, 'Price')
        if price < 0:
            raise InvalidInput('Price must be non-negative')

    @staticmethod
    def _validate_attributes(attributes, prefix='Attribute validation errors'):
        errors = AttributeService.validate_attribute_values(attributes)
        if errors:
            raise AttributeValidationFailed(errors, prefix=prefix)

    @staticmethod
    def _validate_variations(variations: List[Dict]):
        seen_ids = set()
        seen_skus = set()
        for index, variation in enumerate(variations):
            label = f'Variation {index + 1}'

            price = _to_decimal(variation.get('price'), f'{label} price')
            if price is None or price < 0:
                raise InvalidInput(f'{label}: price must be a non-negative number')
            _to_discount(variation.get('discount'), f'{label} discount')

            variation_id = variation.get('id')
            if variation_id:
                if variation_id in seen_ids:
                    raise InvalidInput(f'Duplicate variation id: {variation_id}')
                seen_ids.add(variation_id)

            sku = str(variation.get('sku') or '').strip()
            if sku:
                if sku in seen_skus:
                    raise InvalidInput(f'Duplicate variation SKU: {sku}')
                seen_skus.add(sku)

            ProductService._validate_attributes(
                variation.get('attributes') or [],
                prefix=f'{label} attribute validation errors',
            )

    @staticmethod
    def _check_variation_skus(variations: List[Dict], product: Optional[Product] = None):
        skus = [str(v.get('sku') or '').strip() for v in variations]
        skus = [sku for sku in skus if sku]
        taken = ProductVariation.objects.filter(sku__in=skus)
        if product is not None:
            taken = taken.exclude(product=product)
        taken = list(taken.values_list('sku', flat=True))
        if taken:
            raise EntityConflict(f'Variation SKU already in use: {", ".join(taken)}')

    @staticmethod
    def _incoming_sku(variation: Dict) -> str:
        return str(variation.get('sku') or '').strip()

    @staticmethod
    def _generate_sku(product: Product, reserved: Set[str]) -> str:
        """First free `<slug>-<n>` that is neither stored nor reserved by the current write."""
        n = 1
        while True:
            sku = f"{product.slug}-{n}"
            if sku not in reserved and not ProductVariation.objects.filter(sku=sku).exists():
                reserved.add(sku)
                return sku
            n += 1

    @staticmethod
    def _write_variation_attributes(variation: ProductVariation, attributes):
        VariationAttribute.objects.filter(variation=variation).delete()
        VariationAttribute.objects.bulk_create([
            VariationAttribute(
                variation=variation,
                attribute_id=attr['attributeId'],
                value=attr['value'],
            )
            for attr in _clean_attributes(attributes)
        ])

    @staticmethod
    def _set_store_locations(product: Product, location_ids):
        ProductStoreLocation.objects.filter(product=product).delete()
        ids = []
        for location_id in location_ids or []:
            try:
                ids.append(int(location_id))
            except (TypeError, ValueError):
                continue
        valid = StoreLocation.objects.filter(pk__in=ids).values_list('pk', flat=True)
        ProductStoreLocation.objects.bulk_create([
            ProductStoreLocation(product=product, store_location_id=pk)
            for pk in valid
        ])

    @staticmethod
    def _apply_fields(product: Product, data: Dict, existing: Optional[Product] = None):
        product.name = data['name'].strip()
        product.slug = data['slug'].strip()
        product.sku = (data.get('sku') or '').strip()
        product.description = data.get('description') or ''
        product.important_note = data.get('important_note') or ''
        product.tags = list(data.get('tags') or [])
        product.price = _to_decimal(data['price'], 'Price')
        product.discount = _to_discount(data.get('discount'))
        product.square_meters_per_pack = _to_decimal(
            data.get('square_meters_per_pack'), 'Square meters per pack'
        )
        product.unit_of_measurement = data['unit_of_measurement']
        product.is_active = bool(data.get('is_active', True))
        product.is_featured = bool(data.get('is_featured', False))
        product.has_variations = bool(data.get('has_variations', False))
        product.product_attributes = _clean_attributes(data.get('attributes'))

        product.category = ProductService._resolve_related(
            Category, data.get('category'), 'Category',
            existing.category if existing else None,
        )
        product.brand = ProductService._resolve_related(
            Brand, data.get('brand'), 'Brand',
            existing.brand if existing else None,
        )
        product.collection = ProductService._resolve_related(
            Collection, data.get('collection'), 'Collection',
            existing.collection if existing else None,
        )

        dimensions = data.get('dimensions')
        if dimensions == '' and existing is not None:
            product.dimensions = existing.dimensions
        else:
            product.dimensions = dimensions or ''

    @staticmethod
    def get_product(product_id) -> Product:
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError):
            raise EntityNotFound('Product not found')

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    @staticmethod
    def create_product(data: Dict) -> Product:
        """
        Create a product with its variations and store location links.

        Args:
            data: dashboard form data; related objects are given by slug,
                images as a list (or JSON/comma-separated string) of storage keys.
        """
        ProductService._validate_required(data)

        if Product.objects.filter(slug=data['slug'].strip()).exists():
            raise InvalidInput('A product with this slug already exists')

        ProductService._validate_attributes(data.get('attributes') or [])
        variations = list(data.get('variations') or []) if data.get('has_variations') else []
        ProductService._validate_variations(variations)
        ProductService._check_variation_skus(variations)

        product = Product()
        ProductService._apply_fields(product, data)

        images = parse_image_list(data.get('images'))
        moved = ProductImageService.move_staging_images(
            images,
            category_slug=product.category.slug if product.category else None,
            product_name=product.name,
            slug=product.slug,
        )
        product.images = ProductImageService.apply_moves(images, moved)

        try:
            with transaction.atomic():
                product.save()
                reserved = {ProductService._incoming_sku(v) for v in variations} - {''}
                for index, variation_data in enumerate(variations):
                    ProductService._create_variation(product, variation_data, index, reserved)
                ProductService._set_store_locations(product, data.get('store_location_ids'))
        except Exception as exc:
            if moved:
                logger.warning(
                    "Product %s was not created, removing %d moved image(s)",
                    data.get('slug'), len(moved),
                )
                ProductImageService.delete_images(moved.values())
            if isinstance(exc, IntegrityError):
                logger.warning("Product %s was not created: %s", data.get('slug'), exc)
                raise EntityConflict('Product slug or variation SKU already in use') from exc
            raise

        logger.info(
            "Created product %s (%s) with %d variation(s)",
            product.slug, product.pk, len(variations),
        )
        return product

    @staticmethod
    def _create_variation(product: Product, data: Dict, index: int, reserved: Set[str]) -> ProductVariation:
        variation = ProductVariation.objects.create(
            product=product,
            sku=ProductService._incoming_sku(data) or ProductService._generate_sku(product, reserved),
            price=_to_decimal(data.get('price'), 'Variation price'),
            discount=_to_discount(data.get('discount')),
            sort=data.get('sort') if data.get('sort') is not None else index,
        )
        ProductService._write_variation_attributes(variation, data.get('attributes'))
        return variation

    @staticmethod
    def update_product(product_id, data: Dict) -> Product:
        """
        Update a product and reconcile its variations.

        Incoming variations with the id of an existing variation update it,
        the rest are inserted; existing variations not sent are deleted.
        """
        ProductService._validate_required(data)
        product = ProductService.get_product(product_id)

        slug = data['slug'].strip()
        if Product.objects.filter(slug=slug).exclude(pk=product.pk).exists():
            raise InvalidInput('A product with this slug already exists')

        ProductService._validate_attributes(data.get('attributes') or [])
        has_variations = bool(data.get('has_variations', False))
        variations = list(data.get('variations') or []) if has_variations else []
        ProductService._validate_variations(variations)
        ProductService._check_variation_skus(variations, product=product)

        existing = Product.objects.select_related('category', 'brand', 'collection').get(pk=product.pk)
        ProductService._apply_fields(product, data, existing=existing)

        images = parse_image_list(data.get('images'))
        moved = ProductImageService.move_staging_images(
            images,
            category_slug=product.category.slug if product.category else None,
            product_name=product.name,
            slug=product.slug,
        )
        product.images = ProductImageService.apply_moves(images, moved)

        try:
            with transaction.atomic():
                product.save()
                ProductService._reconcile_variations(product, variations)
                ProductService._set_store_locations(product, data.get('store_location_ids'))
        except IntegrityError as exc:
            logger.warning("Product %s was not updated: %s", product.pk, exc)
            raise EntityConflict('Product slug or variation SKU already in use') from exc

        logger.info("Updated product %s (%s)", product.slug, product.pk)
        return product

    @staticmethod
    def _reconcile_variations(product: Product, variations: List[Dict]):
        """
        Existing rows keep their stored SKU unless a new one is sent; only
        inserted rows get a generated one. SKUs may be exchanged between
        kept rows, so changed rows are parked on a placeholder first.
        """
        existing = {v.pk: v for v in product.variations.all()}

        matched = []
        for data in variations:
            try:
                variation_id = int(data.get('id') or 0)
            except (TypeError, ValueError):
                variation_id = 0
            matched.append(existing.get(variation_id))
        incoming_ids = {v.pk for v in matched if v is not None}

        stale = [pk for pk in existing if pk not in incoming_ids]
        if stale:
            ProductVariation.objects.filter(pk__in=stale).delete()

        final_skus = {}
        for variation, data in zip(matched, variations):
            if variation is not None:
                final_skus[variation.pk] = ProductService._incoming_sku(data) or variation.sku

        changed = [pk for pk, sku in final_skus.items() if sku != existing[pk].sku]
        for pk in changed:
            ProductVariation.objects.filter(pk=pk).update(sku=f'__reconcile-{pk}')

        reserved = {ProductService._incoming_sku(v) for v in variations} - {''}
        reserved.update(final_skus.values())

        for index, (variation, data) in enumerate(zip(matched, variations)):
            if variation is None:
                ProductService._create_variation(product, data, index, reserved)
                continue

            variation.sku = final_skus[variation.pk]
            variation.price = _to_decimal(data.get('price'), 'Variation price')
            variation.discount = _to_discount(data.get('discount'))
            variation.sort = data.get('sort') if data.get('sort') is not None else index
            variation.save()
            ProductService._write_variation_attributes(variation, data.get('attributes'))

        logger.debug(
            "Reconciled variations of %s: %d kept, %d deleted, %d total",
            product.slug, len(incoming_ids), len(stale), len(variations),
        )

    @staticmethod
    def delete_product(product_id) -> Dict:
        """Delete a product; its images are removed on a best-effort basis."""
        product = ProductService.get_product(product_id)

        failed = ProductImageService.delete_images(product.image_list)
        if failed:
            logger.warning(
                "Could not delete %d image(s) of product %s", len(failed), product.slug
            )

        logger.info("Deleting product %s (%s)", product.slug, product.pk)
        product.delete()
        return {'success': True, 'failedImages': failed}

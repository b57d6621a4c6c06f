"""
Attribute rules shared by the dashboard and the storefront:
validation of standardized values, propagation of value renames/deletions
into product data and the product/value junction table.
"""

import logging
from typing import Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Count, Q

from apps.catalog.exceptions import EntityConflict, EntityNotFound, InvalidInput
from apps.catalog.models import (
    AttributeValue,
    Product,
    ProductAttribute,
    ProductAttributeValue,
    VariationAttribute,
    split_values,
)

logger = logging.getLogger(__name__)


class AttributeService:
    """Validation and maintenance of product attributes and their values."""

    @staticmethod
    def get_attribute_lookup() -> Dict[str, ProductAttribute]:
        """Map every key an attribute can be referenced by (id or slug) to the attribute."""
        lookup = {}
        for attribute in ProductAttribute.objects.all():
            lookup[str(attribute.pk)] = attribute
            lookup.setdefault(attribute.slug, attribute)
        return lookup

    @staticmethod
    def resolve_attribute(key, lookup: Optional[Dict[str, ProductAttribute]] = None) -> Optional[ProductAttribute]:
        if lookup is None:
            lookup = AttributeService.get_attribute_lookup()
        return lookup.get(str(key).strip())

    @staticmethod
    def validate_attribute_values(attributes: Iterable[Dict]) -> List[Dict]:
        """
        Check that values of standardized attributes exist in their allowed list.

        Args:
            attributes: [{"attributeId": "5" or "material", "value": "Дерево, ПВХ"}]

        Returns:
            List of {"attributeId", "value", "error"}; empty when everything is valid.
            Unknown attributes and free-text attributes are not checked.
        """
        errors = []
        attributes = list(attributes or [])
        if not attributes:
            return errors

        lookup = AttributeService.get_attribute_lookup()
        allowed_cache = {}

        for attr in attributes:
            raw_value = str(attr.get('value') or '')
            if not raw_value.strip():
                continue

            attribute = lookup.get(str(attr.get('attributeId', '')).strip())
            if attribute is None or not attribute.is_standardized:
                continue

            if attribute.pk not in allowed_cache:
                allowed_cache[attribute.pk] = set(
                    attribute.values.filter(is_active=True).values_list('value', flat=True)
                )
            allowed = allowed_cache[attribute.pk]

            for value in split_values(raw_value):
                if value not in allowed:
                    errors.append({
                        'attributeId': str(attr.get('attributeId')),
                        'value': value,
                        'error': (
                            f'Value "{value}" is not in the list of standardized values '
                            f'for attribute "{attribute.name}"'
                        ),
                    })
        return errors

    @staticmethod
    def sync_product_attribute_values(product: Product) -> int:
        """
        Rebuild the junction rows of a product from its standardized attributes.
        Returns the number of rows written.
        """
        ProductAttributeValue.objects.filter(product=product).delete()

        lookup = AttributeService.get_attribute_lookup()
        rows = []
        seen = set()
        for attr in product.get_attribute_list():
            attribute = lookup.get(attr['attributeId'])
            if attribute is None or not attribute.is_standardized:
                continue
            values = split_values(attr['value'])
            if not values:
                continue
            value_ids = dict(
                attribute.values.filter(value__in=values).values_list('value', 'id')
            )
            for value in values:
                value_id = value_ids.get(value)
                if value_id and (attribute.pk, value_id) not in seen:
                    seen.add((attribute.pk, value_id))
                    rows.append(ProductAttributeValue(
                        product=product,
                        attribute=attribute,
                        value_id=value_id,
                    ))

        ProductAttributeValue.objects.bulk_create(rows)
        return len(rows)

    @staticmethod
    def _rewrite_products(attribute: ProductAttribute, rewrite) -> List[int]:
        """
        Apply rewrite(values) -> new values to every product entry of the attribute.
        Products whose entry changes are saved; returns their ids.
        """
        keys = attribute.keys()
        updated_ids = []

        for product in Product.objects.exclude(product_attributes=[]).exclude(product_attributes__isnull=True):
            entries = product.get_attribute_list()
            changed = False
            new_entries = []
            for entry in entries:
                if entry['attributeId'] not in keys:
                    new_entries.append(entry)
                    continue
                values = split_values(entry['value'])
                new_values = rewrite(values)
                if new_values == values:
                    new_entries.append(entry)
                    continue
                changed = True
                if new_values:
                    new_entries.append({
                        'attributeId': entry['attributeId'],
                        'value': ','.join(new_values),
                    })

            if changed:
                product.product_attributes = new_entries
                product.save(update_fields=['product_attributes'])
                updated_ids.append(product.pk)

        return updated_ids

    @staticmethod
    def remove_value_from_products(attribute: ProductAttribute, value: str) -> List[int]:
        """Remove a value from every product that has it selected."""
        updated = AttributeService._rewrite_products(
            attribute, lambda values: [v for v in values if v != value]
        )
        if updated:
            logger.info(
                "Removed value %r of attribute %s from %d product(s)",
                value, attribute.slug, len(updated),
            )
        return updated

    @staticmethod
    def rename_value_in_products(attribute: ProductAttribute, old_value: str, new_value: str) -> List[int]:
        """Replace a value in every product that has it selected."""
        def rename(values):
            renamed = []
            for v in values:
                v = new_value if v == old_value else v
                if v not in renamed:
                    renamed.append(v)
            return renamed

        updated = AttributeService._rewrite_products(attribute, rename)
        if updated:
            logger.info(
                "Renamed value %r -> %r of attribute %s in %d product(s)",
                old_value, new_value, attribute.slug, len(updated),
            )
        return updated

    @staticmethod
    def count_products_with_attribute_errors() -> int:
        """Number of products whose standardized attribute values fail validation."""
        count = 0
        for product in Product.objects.exclude(product_attributes=[]).exclude(product_attributes__isnull=True):
            if AttributeService.validate_attribute_values(product.get_attribute_list()):
                count += 1
        return count

    # -------------------------------------------------------------------------
    # Dashboard CRUD
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_attribute_unique(name: str, slug: str, exclude_pk=None):
        others = ProductAttribute.objects.all()
        if exclude_pk is not None:
            others = others.exclude(pk=exclude_pk)
        if others.filter(name=name).exists():
            raise EntityConflict(f'Attribute with name "{name}" already exists')
        if others.filter(slug=slug).exists():
            raise EntityConflict(f'Attribute with slug "{slug}" already exists')

    @staticmethod
    def create_attribute(data: Dict) -> ProductAttribute:
        name = (data.get('name') or '').strip()
        slug = (data.get('slug') or '').strip()
        if not name:
            raise InvalidInput('Cannot create attribute: name must not be empty')
        if not slug:
            raise InvalidInput('Cannot create attribute: slug must not be empty')

        AttributeService._check_attribute_unique(name, slug)
        attribute = ProductAttribute.objects.create(
            name=name,
            slug=slug,
            value_type=data.get('value_type') or ProductAttribute._meta.get_field('value_type').default,
            allow_multiple_values=bool(data.get('allow_multiple_values', False)),
        )
        logger.info("Created attribute %s (%s)", attribute.slug, attribute.pk)
        return attribute

    @staticmethod
    def update_attribute(attribute: ProductAttribute, data: Dict) -> ProductAttribute:
        name = (data.get('name', attribute.name) or '').strip()
        slug = (data.get('slug', attribute.slug) or '').strip()
        if not name or not slug:
            raise InvalidInput('Attribute name and slug must not be empty')

        AttributeService._check_attribute_unique(name, slug, exclude_pk=attribute.pk)
        attribute.name = name
        attribute.slug = slug
        if 'value_type' in data:
            attribute.value_type = data['value_type']
        if 'allow_multiple_values' in data:
            attribute.allow_multiple_values = bool(data['allow_multiple_values'])
        attribute.save()
        return attribute

    @staticmethod
    def delete_attribute(attribute: ProductAttribute):
        keys = attribute.keys() | {attribute.name}
        if VariationAttribute.objects.filter(attribute_id__in=keys).exists():
            raise EntityConflict(
                'Cannot delete attribute that is being used in product variations'
            )
        logger.info("Deleting attribute %s (%s)", attribute.slug, attribute.pk)
        attribute.delete()

    @staticmethod
    def create_value(attribute: ProductAttribute, data: Dict) -> AttributeValue:
        value = (data.get('value') or '').strip()
        if not value:
            raise InvalidInput('Value must not be empty')
        if attribute.values.filter(value=value).exists():
            raise EntityConflict(f'Value "{value}" already exists for this attribute')

        sort_order = data.get('sort_order')
        if sort_order is None:
            sort_order = attribute.values.count()

        return AttributeValue.objects.create(
            attribute=attribute,
            value=value,
            slug=data.get('slug') or '',
            sort_order=sort_order,
            is_active=data.get('is_active', True),
        )

    @staticmethod
    @transaction.atomic
    def update_value(attribute_value: AttributeValue, data: Dict) -> AttributeValue:
        new_value = data.get('value')
        if new_value is not None:
            new_value = new_value.strip()
            if not new_value:
                raise InvalidInput('Value must not be empty')

        old_value = attribute_value.value
        renamed = bool(new_value) and new_value != old_value
        if renamed:
            duplicate = AttributeValue.objects.filter(
                attribute=attribute_value.attribute,
                value=new_value,
            ).exclude(pk=attribute_value.pk)
            if duplicate.exists():
                raise EntityConflict(f'Value "{new_value}" already exists for this attribute')
            attribute_value.value = new_value

        if 'slug' in data:
            attribute_value.slug = data['slug'] or ''
        if data.get('sort_order') is not None:
            attribute_value.sort_order = data['sort_order']
        if data.get('is_active') is not None:
            attribute_value.is_active = data['is_active']
        attribute_value.save()

        # Products are re-synced against the saved value
        if renamed:
            AttributeService.rename_value_in_products(
                attribute_value.attribute, old_value, new_value
            )
        return attribute_value

    @staticmethod
    @transaction.atomic
    def delete_value(attribute_value: AttributeValue) -> int:
        """Delete a value after removing it from products. Returns products updated."""
        updated = AttributeService.remove_value_from_products(
            attribute_value.attribute, attribute_value.value
        )
        attribute_value.delete()
        return len(updated)

    @staticmethod
    def get_value_or_404(pk) -> AttributeValue:
        try:
            return AttributeValue.objects.select_related('attribute').get(pk=pk)
        except AttributeValue.DoesNotExist:
            raise EntityNotFound('Attribute value not found')

    @staticmethod
    def attributes_with_counts():
        """Attributes annotated with the number of products carrying one of their values."""
        return ProductAttribute.objects.annotate(
            product_count=Count('product_values__product', distinct=True),
            value_count=Count('values', distinct=True),
        ).order_by('name')

    @staticmethod
    def value_product_counts(attribute: ProductAttribute) -> Dict[int, int]:
        rows = (
            AttributeValue.objects.filter(attribute=attribute)
            .annotate(product_count=Count(
                'product_values__product',
                filter=Q(product_values__product__is_active=True),
                distinct=True,
            ))
            .values_list('id', 'product_count')
        )
        return dict(rows)

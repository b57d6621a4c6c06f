"""
Display order of product variations: by their attribute values, with
numbers compared numerically ("9" before "10", "2,5" read as 2.5).
"""

import re
from typing import List

_CHUNK = re.compile(r'(\d+(?:\.\d+)?)')


def natural_key(value: str):
    """Sort key splitting a value into text and numeric parts."""
    value = str(value or '').strip().lower().replace(',', '.')
    key = []
    for part in _CHUNK.split(value):
        if not part:
            continue
        if _CHUNK.fullmatch(part):
            key.append((0, float(part), ''))
        else:
            key.append((1, 0.0, part))
    return key


def variation_sort_key(variation):
    values = [natural_key(attr['value']) for attr in variation.get_attribute_list()]
    return (values, variation.sort, variation.pk or 0)


def sort_variations_for_display(variations) -> List:
    """Order variations by attribute values, then by their manual sort."""
    return sorted(variations, key=variation_sort_key)

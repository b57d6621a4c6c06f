"""
Product image storage.

Images live in Django's default storage under keys like
products/<category>/<product-name>/<file>. Files uploaded before a product
exists are kept under the staging prefix and moved into place when the
product is saved.
"""

import json
import logging
import os
import re
import time
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from apps.catalog.exceptions import InvalidInput, StorageFailure

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = int(1.5 * 1024 * 1024)
MAX_SVG_SIZE = 5 * 1024 * 1024

ALLOWED_CONTENT_TYPES = (
    'image/jpeg',
    'image/jpg',
    'image/png',
    'image/webp',
    'image/svg+xml',
)

# Folders stored without per-product subdirectories
FLAT_FOLDERS = ('brands', 'country-flags')


def _timestamp():
    return int(time.time() * 1000)


def sanitize_filename(name: str) -> str:
    """Lowercase, replace anything outside [a-z0-9.-] and squeeze dashes."""
    name = re.sub(r'[^a-z0-9.-]', '-', (name or '').lower())
    name = re.sub(r'-+', '-', name)
    return name.strip('-')


def sanitize_segment(value: str) -> str:
    segment = re.sub(r'[^a-z0-9-]', '-', (value or '').lower())
    segment = re.sub(r'-+', '-', segment)
    return segment.strip('-')


def is_staging_path(path: str) -> bool:
    return bool(path) and path.startswith(f"{settings.STAGING_PREFIX}/")


def image_url(path: str) -> str:
    if not path:
        return ''
    if path.startswith(('http://', 'https://')):
        return path
    return f"{settings.ASSETS_BASE_URL.rstrip('/')}/{path.lstrip('/')}"


def parse_image_list(images) -> List[str]:
    """Accept a list, a JSON array string or a comma-separated string."""
    if not images:
        return []
    if isinstance(images, (list, tuple)):
        return [str(path).strip() for path in images if str(path).strip()]
    images = str(images).strip()
    if images.startswith('['):
        try:
            parsed = json.loads(images)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(path).strip() for path in parsed if str(path).strip()]
    return [path.strip() for path in images.split(',') if path.strip()]


class ProductImageService:
    """Upload, move and delete images in the configured storage."""

    @staticmethod
    def is_svg(uploaded_file) -> bool:
        content_type = getattr(uploaded_file, 'content_type', '') or ''
        return content_type == 'image/svg+xml' or uploaded_file.name.lower().endswith('.svg')

    @staticmethod
    def validate_file(uploaded_file):
        if uploaded_file is None:
            raise InvalidInput('No file provided')

        is_svg = ProductImageService.is_svg(uploaded_file)
        content_type = getattr(uploaded_file, 'content_type', '') or ''
        if not is_svg and content_type not in ALLOWED_CONTENT_TYPES:
            raise InvalidInput(
                'Invalid file type. Only JPEG, PNG, WebP and SVG files are allowed.'
            )

        max_size = MAX_SVG_SIZE if is_svg else MAX_IMAGE_SIZE
        if uploaded_file.size > max_size:
            limit = '5MB' if is_svg else '1.5MB'
            raise InvalidInput(f'File too large. Maximum size is {limit}.')

    @staticmethod
    def build_directory(
        folder: str,
        slug: Optional[str] = None,
        category_slug: Optional[str] = None,
        product_name: Optional[str] = None,
        staging: bool = False,
    ) -> str:
        folder = (folder or settings.PRODUCT_IMAGE_FOLDER).strip('/')

        category_segment = sanitize_segment(category_slug)
        product_segment = sanitize_segment(product_name)
        slug_segment = sanitize_segment(slug)

        if folder in FLAT_FOLDERS:
            directory = folder
        elif category_segment and product_segment:
            directory = f"{folder}/{category_segment}/{product_segment}"
        elif slug_segment:
            # Names in Cyrillic sanitize to nothing
            directory = f"{folder}/{slug_segment}"
        else:
            directory = f"{folder}/temp-{_timestamp()}"

        if staging:
            directory = f"{settings.STAGING_PREFIX}/{directory}"
        return directory

    @staticmethod
    def available_name(directory: str, filename: str) -> str:
        """directory/filename, adding -copy, -copy2, ... while the key exists."""
        base, ext = os.path.splitext(filename)
        candidate = f"{directory}/{filename}"
        counter = 1
        while default_storage.exists(candidate):
            suffix = '-copy' if counter == 1 else f'-copy{counter}'
            candidate = f"{directory}/{base}{suffix}{ext}"
            counter += 1
        return candidate

    @staticmethod
    def upload(
        uploaded_file,
        folder: Optional[str] = None,
        slug: Optional[str] = None,
        category_slug: Optional[str] = None,
        product_name: Optional[str] = None,
        staging: bool = False,
    ) -> Dict[str, str]:
        """
        Validate and store an uploaded image.

        Returns:
            {"filename": storage key, "url": public url}
        """
        ProductImageService.validate_file(uploaded_file)

        base, ext = os.path.splitext(uploaded_file.name or '')
        base = sanitize_filename(base)
        ext = sanitize_filename(ext.lstrip('.'))
        if not base:
            base = f"image-{_timestamp()}"
        filename = f"{base}.{ext}" if ext else base

        directory = ProductImageService.build_directory(
            folder, slug=slug, category_slug=category_slug,
            product_name=product_name, staging=staging,
        )
        key = ProductImageService.available_name(directory, filename)

        try:
            saved = default_storage.save(key, uploaded_file)
        except OSError as exc:
            logger.exception("Failed to upload image %s", key)
            raise StorageFailure(f'Failed to upload image: {exc}')

        logger.info("Uploaded image %s (%d bytes)", saved, uploaded_file.size)
        return {'filename': saved, 'url': image_url(saved)}

    @staticmethod
    def move_staging_images(
        paths: Iterable[str],
        category_slug: Optional[str] = None,
        product_name: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Move staging images into the product's directory.

        Returns:
            {old_path: new_path} for every staging path that was moved.
        """
        moved = {}
        directory = ProductImageService.build_directory(
            settings.PRODUCT_IMAGE_FOLDER,
            slug=slug, category_slug=category_slug, product_name=product_name,
        )
        for path in paths or []:
            if not is_staging_path(path):
                continue

            target = ProductImageService.available_name(directory, os.path.basename(path))

            try:
                with default_storage.open(path, 'rb') as source:
                    content = source.read()
                new_path = default_storage.save(target, ContentFile(content))
                default_storage.delete(path)
            except OSError as exc:
                logger.exception("Failed to move staging image %s", path)
                # Leave the storage as it was before this call
                ProductImageService.delete_images(moved.values())
                raise StorageFailure(f'Failed to move staging images: {exc}')

            moved[path] = new_path

        if moved:
            logger.info("Moved %d staging image(s) to %s", len(moved), directory)
        return moved

    @staticmethod
    def apply_moves(images: List[str], moved: Dict[str, str]) -> List[str]:
        return [moved.get(path, path) for path in images]

    @staticmethod
    def delete_product_image(filename: str, current_images=None) -> Dict:
        """
        Delete an image unless the product still references it.

        Returns:
            {"deleted": bool, "skipped": bool, "message": str}
        """
        if not filename:
            raise InvalidInput('Filename is required')

        if filename in parse_image_list(current_images):
            logger.info("Image %s is still in use, not deleting", filename)
            return {
                'deleted': False,
                'skipped': True,
                'message': 'Image is still in use by the product',
            }

        try:
            default_storage.delete(filename)
        except OSError as exc:
            logger.exception("Failed to delete image %s", filename)
            raise StorageFailure(f'Failed to delete image: {exc}')

        logger.info("Deleted image %s", filename)
        return {'deleted': True, 'skipped': False, 'message': 'Image deleted'}

    @staticmethod
    def delete_images(paths: Iterable[str]) -> List[str]:
        """Best-effort deletion; returns the paths that could not be deleted."""
        failed = []
        for path in paths or []:
            if not path:
                continue
            try:
                default_storage.delete(path)
            except OSError:
                logger.warning("Could not delete image %s", path, exc_info=True)
                failed.append(path)
        return failed

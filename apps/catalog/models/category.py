from django.db import models
from django.utils.text import slugify


class Category(models.Model):
    """
    Hierarchical product categories.
    Examples: Напольные покрытия > Ламинат > Ламинат 33 класса
    """
    name = models.CharField(
        max_length=200,
        verbose_name='Название'
    )
    slug = models.SlugField(
        max_length=200,
        unique=True,
        allow_unicode=True,
        verbose_name='Slug'
    )
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        verbose_name='Родительская категория'
    )
    image = models.CharField(
        max_length=500,
        blank=True,
        verbose_name='Изображение',
        help_text='Путь к файлу в хранилище'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Активна'
    )
    order = models.PositiveIntegerField(
        default=0,
        verbose_name='Порядок'
    )

    class Meta:
        ordering = ['order', 'name']
        verbose_name = 'Категория'
        verbose_name_plural = 'Категории'

    def __str__(self):
        return self.full_path

    @property
    def full_path(self):
        """Ламинат > Ламинат 33 класса"""
        return ' > '.join(c.name for c in self.get_ancestors() + [self])

    def get_ancestors(self):
        """Root first, immediate parent last. Stops on a parent loop."""
        chain = []
        seen = {self.pk}
        parent = self.parent
        while parent is not None and parent.pk not in seen:
            seen.add(parent.pk)
            chain.append(parent)
            parent = parent.parent
        chain.reverse()
        return chain

    def get_descendants(self):
        """All categories below this one, one query per tree level."""
        found = []
        level_ids = [self.pk]
        seen = {self.pk}
        while level_ids:
            level = [
                c for c in Category.objects.filter(parent_id__in=level_ids)
                if c.pk not in seen
            ]
            seen.update(c.pk for c in level)
            found.extend(level)
            level_ids = [c.pk for c in level]
        return found

    def get_tree_ids(self):
        """Ids of this category and all of its descendants."""
        return [self.pk] + [c.pk for c in self.get_descendants()]

    @property
    def level(self):
        return len(self.get_ancestors())

    def save(self, *args, **kwargs):
        if not self.slug:
            base = slugify(self.name, allow_unicode=True) or 'category'
            slug = base
            suffix = 1
            while Category.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base}-{suffix}"
                suffix += 1
            self.slug = slug
        super().save(*args, **kwargs)

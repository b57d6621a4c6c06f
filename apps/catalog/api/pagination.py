from rest_framework.pagination import BasePagination
from rest_framework.response import Response

from apps.catalog.services.listing import ProductListingService


class ProductPagination(BasePagination):
    """
    ?page=&limit= pagination returning
    {"products": [...], "pagination": {page, limit, totalCount, totalPages,
    hasNextPage, hasPreviousPage}}. Without both params everything is one page.
    """

    def paginate_queryset(self, queryset, request, view=None):
        items, self.meta = ProductListingService.paginate(
            queryset,
            request.query_params.get('page'),
            request.query_params.get('limit'),
        )
        return items

    def get_paginated_response(self, data):
        return Response({'products': data, 'pagination': self.meta})

# ledgerbook_core/pagination.py
import math

from django.core.paginator import InvalidPage, Page
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .responses import envelope


class EnvelopePagination(PageNumberPagination):
    """
    Page-number pagination that answers inside the success envelope:
    `{success, data: {<results_key>: [...], pagination: {page, limit, total, pages}}}`.

    A page past the end is an empty page that still reports the totals.
    """
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 500
    results_key = 'results'

    def paginate_queryset(self, queryset, request, view=None):
        page_size = self.get_page_size(request)
        if not page_size:
            return None

        self.request = request
        paginator = self.django_paginator_class(queryset, page_size)
        page_number = self.get_page_number(request, paginator)
        try:
            number = int(page_number)
        except (TypeError, ValueError):
            number = 0
        if number < 1:
            raise ValidationError({self.page_query_param: [_('Page must be a positive integer.')]})

        if number > paginator.num_pages:
            self.page = Page([], number, paginator)
        else:
            try:
                self.page = paginator.page(number)
            except InvalidPage as exc:
                raise ValidationError({self.page_query_param: [str(exc)]}) from exc
        return list(self.page)

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        return Response(envelope(data={
            self.results_key: data,
            'pagination': {
                'page': self.page.number,
                'limit': limit,
                'total': total,
                'pages': math.ceil(total / limit) if limit else 0,
            },
        }))

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'success': {'type': 'boolean'},
                'data': {
                    'type': 'object',
                    'properties': {
                        self.results_key: schema,
                        'pagination': {
                            'type': 'object',
                            'properties': {
                                'page': {'type': 'integer'},
                                'limit': {'type': 'integer'},
                                'total': {'type': 'integer'},
                                'pages': {'type': 'integer'},
                            },
                        },
                    },
                },
            },
        }

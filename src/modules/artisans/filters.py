import django_filters
from django.db.models import TextField
from django.db.models.functions import Cast

from modules.artisans.models import Artisan
from modules.manufacturing.constants import ManufacturingStage


class ArtisanFilter(django_filters.FilterSet):
    role = django_filters.CharFilter(field_name="role", lookup_expr="iexact")
    active = django_filters.BooleanFilter(field_name="active")
    specialty = django_filters.ChoiceFilter(
        choices=ManufacturingStage.choices, method="filter_specialty"
    )

    class Meta:
        model = Artisan
        fields = ["role", "active", "specialty"]

    def filter_specialty(self, queryset, name, value):
        # JSON containment is not portable; match the serialized list instead.
        return queryset.annotate(
            specialties_text=Cast("specialties", output_field=TextField())
        ).filter(specialties_text__contains=f'"{value}"')

from django_filters import rest_framework as filters

from projects.models import Project


class ProjectFilter(filters.FilterSet):
    mine = filters.BooleanFilter(method="filter_mine", label="Only projects owned by the caller")
    tags = filters.CharFilter(method="filter_tags", label="Comma-separated tag names (any match)")

    class Meta:
        model = Project
        fields = ["status", "visibility", "mine", "tags"]

    def filter_mine(self, queryset, name, value):
        if value:
            return queryset.filter(owner=self.request.user)
        return queryset

    def filter_tags(self, queryset, name, value):
        names = [tag.strip().lower() for tag in value.split(",") if tag.strip()]
        if not names:
            return queryset
        return queryset.filter(tags__name__in=names).distinct()

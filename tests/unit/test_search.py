"""
Unit tests for the daycare search and filter engine.
"""
import pytest
from werkzeug.datastructures import MultiDict

from models import Daycare
from services.search_service import (
    DaycareQueryBuilder,
    FilterClause,
    SearchFilters,
    age_range_clause,
    build_pagination,
    features_clause,
    location_clause,
    normalize_age_range,
    price_clause,
    search_daycares,
    text_clause,
    ward_clause,
)


def names_matching(clause_or_predicate):
    expression = getattr(clause_or_predicate, 'expression', clause_or_predicate)
    return sorted(d.name for d in Daycare.query.filter(expression).all())


class TestSearchFilters:
    """Parsing raw parameters into typed filters."""

    def test_defaults(self):
        filters = SearchFilters.from_params({})
        assert filters.page == 1
        assert filters.limit == 10
        assert filters.availability == 'yes'
        assert filters.age_groups == []

    @pytest.mark.parametrize('page,limit', [('0', '-3'), ('abc', ''), ('-1', 'ten'), (None, None)])
    def test_invalid_pagination_falls_back(self, page, limit):
        filters = SearchFilters.from_params({'page': page, 'limit': limit})
        assert (filters.page, filters.limit) == (1, 10)

    def test_limit_is_capped(self):
        filters = SearchFilters.from_params({'limit': '5000'}, max_limit=100)
        assert filters.limit == 100

    @pytest.mark.parametrize('value', ['abc', 'nan', 'inf', '-inf', ''])
    def test_unparsable_prices_are_ignored(self, value):
        filters = SearchFilters.from_params({'priceMin': value, 'priceMax': value})
        assert filters.price_min is None
        assert filters.price_max is None

    def test_list_inputs_accept_repeats_and_commas(self):
        params = MultiDict([('features', 'Meals, Outdoor Play'), ('features', 'Montessori'),
                            ('programAge', 'School Age')])
        filters = SearchFilters.from_params(params)
        assert filters.features == ['Meals', 'Outdoor Play', 'Montessori']
        assert filters.program_ages == ['School Age']

    @pytest.mark.parametrize('raw,expected', [
        ('Infants', ['infant']),
        ('infant,Toddlers', ['infant', 'toddler']),
        ('School Age', ['schoolAge']),
        ('school-age', ['schoolAge']),
        ('school_age', ['schoolAge']),
        ('SCHOOLAGE', ['schoolAge']),
        ('Preschool,Kindergarten', ['preschool', 'kindergarten']),
        ('teens,infants', ['infant']),
        ('', []),
    ])
    def test_normalize_age_range(self, raw, expected):
        assert normalize_age_range(raw) == expected

    @pytest.mark.parametrize('value,expected', [
        ('no', 'no'), ('NO', 'no'), ('yes', 'yes'), ('maybe', 'yes'), (None, 'yes'),
    ])
    def test_availability(self, value, expected):
        assert SearchFilters.from_params({'availability': value}).availability == expected

    @pytest.mark.parametrize('value,expected', [
        ('true', True), ('1', True), ('yes', True), ('on', True), (True, True),
        ('false', False), ('0', False), ('', False), (None, False),
    ])
    def test_boolean_flags(self, value, expected):
        filters = SearchFilters.from_params({'cwelcc': value, 'subsidy': value})
        assert filters.cwelcc is expected
        assert filters.subsidy is expected

    def test_to_dict_echoes_applied_filters(self):
        filters = SearchFilters.from_params({'q': 'sun', 'ageRange': 'Infants', 'page': '2'})
        assert filters.to_dict() == {
            'q': 'sun', 'ageRange': ['infant'], 'availability': 'yes', 'page': 2, 'limit': 10,
        }


class TestClauses:
    """Each clause evaluated on its own against stored listings."""

    def test_text_matches_name_description_or_feature(self, make_daycare):
        make_daycare('Sunshine Care')
        make_daycare('Bright Kids', description='A sunny room')
        make_daycare('Tiny Tots', features=['Sunroom'])
        make_daycare('Other Place')

        assert names_matching(text_clause('sun')) == ['Bright Kids', 'Sunshine Care', 'Tiny Tots']

    def test_text_is_literal(self, make_daycare):
        make_daycare('100% Fun')
        make_daycare('1000 Fun')
        make_daycare('Under_score')
        make_daycare('Underxscore')

        assert names_matching(text_clause('100%')) == ['100% Fun']
        assert names_matching(text_clause('r_s')) == ['Under_score']

    def test_location_matches_city_or_address(self, make_daycare):
        make_daycare('A', city='Oakville', address='1 Main St')
        make_daycare('B', city='Toronto', address='9 Oakville Rd')
        make_daycare('C', city='Toronto', address='2 Bay St')

        assert names_matching(location_clause('oakville')) == ['A', 'B']

    def test_price_bounds_are_inclusive_and_optional(self, make_daycare):
        make_daycare('Cheap', price=500)
        make_daycare('Mid', price=1000)
        make_daycare('Dear', price=2000)

        assert names_matching(price_clause(500, 1000)) == ['Cheap', 'Mid']
        assert names_matching(price_clause(1000, None)) == ['Dear', 'Mid']
        assert names_matching(price_clause(None, 999)) == ['Cheap']
        assert price_clause(None, None) is None

    def test_age_range_yes_is_or_over_bands(self, make_daycare):
        make_daycare('Infants Only', capacity={'infant': 5})
        make_daycare('Toddlers Only', capacity={'toddler': 5})
        make_daycare('Full Infant', capacity={'infant': 0, 'preschool': 4})

        assert names_matching(age_range_clause(['infant'])) == ['Infants Only']
        assert names_matching(age_range_clause(['infant', 'toddler'])) == ['Infants Only', 'Toddlers Only']

    def test_age_range_no_includes_missing_and_zero(self, make_daycare):
        make_daycare('Serves Infants', capacity={'infant': 5})
        make_daycare('Zero Infants', capacity={'infant': 0})
        make_daycare('No Infant Row', capacity={'toddler': 3})
        make_daycare('No Rows')

        assert names_matching(age_range_clause(['infant'], 'no')) == [
            'No Infant Row', 'No Rows', 'Zero Infants',
        ]

    def test_age_range_no_is_or_over_bands(self, make_daycare):
        make_daycare('Both', capacity={'infant': 5, 'toddler': 5})
        make_daycare('Infant Only', capacity={'infant': 5})

        assert names_matching(age_range_clause(['infant', 'toddler'], 'no')) == ['Infant Only']

    def test_ward_matches_ward_or_city(self, make_daycare):
        make_daycare('A', ward='Ward 7', city='Mississauga')
        make_daycare('B', ward='', city='Ward 7 Village')
        make_daycare('C', ward='Ward 3', city='Brampton')

        assert names_matching(ward_clause('ward 7')) == ['A', 'B']

    def test_features_any_of(self, make_daycare):
        make_daycare('A', features=['Meals'])
        make_daycare('B', features=['Montessori', 'Outdoor Play'])
        make_daycare('C', features=['Transport'])

        assert names_matching(features_clause(['Meals', 'Outdoor Play'])) == ['A', 'B']

    @pytest.mark.parametrize('builder', [text_clause, location_clause, ward_clause])
    def test_empty_input_produces_no_clause(self, builder):
        assert builder(None) is None
        assert builder('') is None


class TestQueryBuilder:
    """Reducing clauses into a single predicate."""

    def test_empty_builder_matches_everything(self, make_daycare):
        make_daycare('A')
        make_daycare('B')
        assert names_matching(DaycareQueryBuilder().predicate()) == ['A', 'B']

    def test_grouped_clauses_are_or_ed(self, make_daycare):
        make_daycare('Sunshine', city='Ottawa')
        make_daycare('Maple', city='Toronto')
        make_daycare('Oak', city='Ottawa')

        builder = (DaycareQueryBuilder()
                   .add(text_clause('sunshine'))
                   .add(location_clause('toronto')))
        assert names_matching(builder.predicate()) == ['Maple', 'Sunshine']

    def test_ungrouped_clauses_are_and_ed(self, make_daycare):
        make_daycare('A', city='Toronto', price=900)
        make_daycare('B', city='Toronto', price=1500)
        make_daycare('C', city='Ottawa', price=900)

        builder = (DaycareQueryBuilder()
                   .add(FilterClause('city', Daycare.city == 'Toronto'))
                   .add(price_clause(None, 1000)))
        assert names_matching(builder.predicate()) == ['A']

    def test_none_clauses_are_skipped(self):
        builder = DaycareQueryBuilder().add(None).add(text_clause(''))
        assert builder.names == []

    def test_from_filters_names(self):
        filters = SearchFilters.from_params({'q': 'x', 'ward': 'w', 'cwelcc': 'true'})
        assert DaycareQueryBuilder.from_filters(filters).names == ['q', 'ward', 'cwelcc']


class TestPagination:

    @pytest.mark.parametrize('total,page,limit,pages,has_next,has_prev', [
        (0, 1, 10, 0, False, False),
        (10, 1, 10, 1, False, False),
        (11, 1, 10, 2, True, False),
        (25, 3, 10, 3, False, True),
        (25, 5, 10, 3, False, True),
    ])
    def test_build_pagination(self, total, page, limit, pages, has_next, has_prev):
        result = build_pagination(total, page, limit)
        assert result['totalPages'] == pages
        assert result['hasNextPage'] is has_next
        assert result['hasPreviousPage'] is has_prev

    def test_search_pages_in_id_order(self, make_daycare):
        created = [make_daycare(f'Daycare {i}') for i in range(5)]

        result = search_daycares(SearchFilters(page=2, limit=2))

        assert result['totalCount'] == 5
        assert result['totalPages'] == 3
        assert [d.id for d in result['listings']] == [created[2].id, created[3].id]

    def test_page_past_the_end_is_empty(self, make_daycare):
        make_daycare('Only')
        result = search_daycares(SearchFilters(page=4, limit=10))
        assert result['listings'] == []
        assert result['totalCount'] == 1

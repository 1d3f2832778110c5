"""
Unit tests for the daycare directory service.
"""
import pytest
from werkzeug.datastructures import MultiDict

from services.daycare_service import DaycareService


@pytest.fixture
def service(db_session):
    return DaycareService()


@pytest.fixture
def catalog(make_daycare):
    return [
        make_daycare('Little Sprouts', city='Toronto', region='Toronto', daycare_type='Licensed Centre',
                     program_age='Infant to Preschool', rating=4.5, cwelcc=True,
                     capacity={'infant': 10, 'toddler': 5}),
        make_daycare('Maple Grove', city='Mississauga', region='Peel', daycare_type='Montessori',
                     program_age='Toddler to Kindergarten', rating=4.0, subsidy_available=True,
                     capacity={'toddler': 8}),
        make_daycare('Sunrise Home', city='Brampton', region='Peel', daycare_type='Home Child Care',
                     program_age='NO', rating=3.0, cwelcc=True,
                     capacity={'schoolAge': 6}),
    ]


class TestSearch:

    def test_search_envelope(self, service, catalog):
        result = service.search(MultiDict({'region': 'peel', 'limit': '1'}))

        assert result.status_code == 200
        assert [d['name'] for d in result.body['data']] == ['Maple Grove']
        pagination = result.body['metadata']['pagination']
        assert pagination == {
            'totalCount': 2, 'currentPage': 1, 'totalPages': 2, 'limit': 1,
            'hasNextPage': True, 'hasPreviousPage': False,
        }
        assert result.body['metadata']['filters']['region'] == 'peel'

    def test_search_limit_capped_by_config(self, app, service, catalog):
        app.config['SEARCH_MAX_LIMIT'] = 2
        result = service.search({'limit': '50'})
        assert result.body['metadata']['pagination']['limit'] == 2
        assert len(result.body['data']) == 2

    def test_page_past_the_end_is_empty(self, service, catalog):
        result = service.search({'page': '99999999999999999999'})

        assert result.status_code == 200
        assert result.body['data'] == []
        pagination = result.body['metadata']['pagination']
        assert pagination['totalCount'] == len(catalog)
        assert pagination['hasNextPage'] is False


class TestDetail:

    def test_by_id(self, service, catalog):
        result = service.get_by_id(str(catalog[1].id))
        assert result.body['data']['name'] == 'Maple Grove'

    def test_by_name_fallback(self, service, catalog):
        assert service.get_by_id('sunrise').body['data']['name'] == 'Sunrise Home'

    def test_not_found(self, service, catalog):
        result = service.get_by_id('9999')
        assert result.status_code == 404
        assert result.body['error'] == 'No daycare found with ID: 9999'


class TestLookups:

    def test_list_all(self, service, catalog):
        result = service.list_all()
        assert result.body['metadata']['totalCount'] == 3
        assert 'timestamp' in result.body['metadata']

    def test_locations_sorted_distinct(self, service, catalog, make_daycare):
        make_daycare('Second Toronto', city='Toronto')
        result = service.locations()
        assert result.body['data'] == ['Brampton', 'Mississauga', 'Toronto']
        assert result.body['count'] == 3

    def test_regions_skip_placeholders(self, service, catalog, make_daycare):
        make_daycare('No Region', region='')
        make_daycare('Unknown Region', region='NO')
        assert service.regions().body['data'] == ['Peel', 'Toronto']

    def test_cities_by_region(self, service, catalog):
        result = service.cities_by_region('peel')
        assert result.body['data'] == ['Brampton', 'Mississauga']
        assert result.body['region'] == 'peel'
        assert service.cities_by_region('').body['data'] == []

    def test_program_ages(self, service, catalog):
        assert service.program_ages().body['data'] == ['Infant to Preschool', 'Toddler to Kindergarten']

    def test_types_by_region_and_city(self, service, catalog):
        result = service.types_by_region_and_city('Peel', 'brampton')
        assert result.body['data'] == ['Home Child Care']
        assert result.body['city'] == 'brampton'
        assert len(service.types_by_region_and_city().body['data']) == 3

    def test_stats(self, service, catalog):
        stats = service.stats().body['data']

        assert stats['totalDaycares'] == 3
        assert stats['averageRating'] == 3.83
        assert stats['locations'] == 3
        assert stats['ageGroups'] == {
            'infant': 1, 'toddler': 2, 'preschool': 0, 'kindergarten': 0, 'schoolAge': 1,
        }
        assert stats['cwelcc'] == 2
        assert stats['subsidyAvailable'] == 1

    def test_stats_empty_catalog(self, service):
        stats = service.stats().body['data']
        assert stats['totalDaycares'] == 0
        assert stats['averageRating'] == 0

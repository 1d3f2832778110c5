"""
Regression tests to ensure previously fixed bugs do not re-emerge.
"""
from app import db
from models import User


class TestRegressionSuite:
    """A collection of regression tests."""

    def test_ward_narrows_text_search(self, client, make_daycare):
        """
        Regression Test: ``ward`` is ANDed with the ``q``/``location`` disjunction,
        so a ward match alone must not pull in listings that fail the ``q`` filter.
        """
        make_daycare('Sunshine Care', city='Toronto', ward='Ward 10')
        make_daycare('Maple Care', city='Toronto', ward='Ward 10')
        make_daycare('Sunshine West', city='Toronto', ward='Ward 2')

        response = client.get('/api/daycares/search', query_string={'q': 'sunshine', 'ward': 'Ward 10'})
        assert [d['name'] for d in response.get_json()['data']] == ['Sunshine Care']

    def test_q_and_location_form_one_disjunction(self, client, make_daycare):
        make_daycare('Sunshine Care', city='Ottawa')
        make_daycare('Maple Care', city='Toronto')
        make_daycare('Oak Care', city='Ottawa')

        response = client.get('/api/daycares/search?q=sunshine&location=toronto')
        assert [d['name'] for d in response.get_json()['data']] == ['Sunshine Care', 'Maple Care']

    def test_percent_is_not_a_wildcard(self, client, make_daycare):
        make_daycare('Regular Daycare')
        response = client.get('/api/daycares/search', query_string={'q': '%'})
        assert response.get_json()['data'] == []

    def test_age_group_full_and_missing_bands(self, client, make_daycare):
        """A listing with toddler capacity 0 and infant capacity 5."""
        make_daycare('Infant Room', capacity={'toddler': 0, 'infant': 5})

        def names(query):
            return [d['name'] for d in client.get(f'/api/daycares/search?{query}').get_json()['data']]

        assert names('ageRange=Toddlers&availability=no') == ['Infant Room']
        assert names('ageRange=Toddlers&availability=yes') == []
        assert names('ageRange=Infants&availability=yes') == ['Infant Room']

    def test_profile_update_keeps_unrelated_fields(self, logged_in_client, test_user):
        """Updating one field must not reset children or consents."""
        response = logged_in_client.put('/api/auth/profile', json={'phone': '6475550100'})
        assert response.status_code == 200

        db.session.expire_all()
        user = db.session.get(User, test_user.id)
        assert user.children == [{'name': 'Sam', 'age': 3, 'specialNeeds': ''}]
        assert user.acknowledgement is True
        assert user.profile_complete is True

    def test_second_verification_with_same_token_fails(self, client, unverified_user, outbox):
        assert client.get(f'/api/auth/verify-email/{"a" * 64}').status_code == 200
        response = client.get(f'/api/auth/verify-email/{"a" * 64}')

        assert response.status_code == 400
        assert response.get_json()['details']['code'] == 'INVALID_OR_EXPIRED_TOKEN'
        assert len([m for m in outbox if 'Welcome' in m.subject]) == 1

"""
Unit tests for account payload validation.
"""
import pytest
from services.validators import (
    coerce_age,
    is_valid_email,
    normalize_children,
    normalize_email,
    validate_password,
    validate_profile_fields,
    validate_registration,
)


class TestEmailHelpers:

    @pytest.mark.parametrize('email', ['a@b.co', 'first.last+tag@example.org'])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize('email', ['', 'plain', 'a@b', '@example.com', None, 42])
    def test_invalid(self, email):
        assert not is_valid_email(email)

    def test_normalize_email(self):
        assert normalize_email('  Parent@Example.COM ') == 'parent@example.com'
        assert normalize_email('   ') is None
        assert normalize_email(None) is None


class TestFieldValidation:

    @pytest.mark.parametrize('value,expected', [
        (3, 3), (3.0, 3), ('4', 4), (' 5 ', 5), (2.5, None), ('two', None), (True, None), (None, None),
    ])
    def test_coerce_age(self, value, expected):
        assert coerce_age(value) == expected

    def test_normalize_children_drops_non_objects(self):
        children = normalize_children([{'name': ' Sam ', 'age': '3'}, 'bogus'])
        assert children == [{'name': 'Sam', 'age': 3, 'specialNeeds': ''}]

    @pytest.mark.parametrize('value', [5, 'Sam', {'name': 'Sam'}, None])
    def test_normalize_children_non_list(self, value):
        assert normalize_children(value) == []

    def test_password_length(self):
        assert validate_password('12345')
        assert validate_password(None)
        assert validate_password('123456') == []

    def test_profile_fields(self):
        errors = validate_profile_fields({'firstName': 'J', 'phone': '123', 'children': 'none'})
        assert len(errors) == 3

    def test_child_age_out_of_range(self):
        errors = validate_profile_fields({'children': [{'name': 'A', 'age': 19}]})
        assert errors == ['Child age must be between 1 and 18']


class TestRegistrationValidation:

    def test_valid_payload(self, sample_registration_data):
        assert validate_registration(sample_registration_data) == []

    @pytest.mark.parametrize('field,value', [
        ('email', 'not-an-email'),
        ('password', '123'),
        ('address', 'ab'),
        ('userType', 'admin'),
        ('children', []),
    ])
    def test_invalid_fields(self, sample_registration_data, field, value):
        sample_registration_data[field] = value
        assert validate_registration(sample_registration_data)

    def test_missing_address(self, sample_registration_data):
        del sample_registration_data['address']
        assert validate_registration(sample_registration_data) == [
            'Postal address or code is required (at least 3 characters)'
        ]

    def test_consents_must_be_literally_true(self, sample_registration_data):
        sample_registration_data['communicationPreferences'] = {'email': 'true', 'acknowledgement': 1}
        errors = validate_registration(sample_registration_data)
        assert 'Email consent is required' in errors
        assert 'Acknowledgement is required to proceed with registration' in errors

    def test_provider_requires_daycare_id(self, sample_registration_data):
        sample_registration_data.update({'userType': 'provider', 'children': []})
        assert validate_registration(sample_registration_data) == [
            'Daycare ID is required for provider accounts'
        ]
        sample_registration_data['daycareId'] = 'DC-17'
        assert validate_registration(sample_registration_data) == []

    def test_parent_needs_a_child_with_valid_age(self, sample_registration_data):
        sample_registration_data['children'] = [{'name': 'A', 'age': 'unknown'}]
        errors = validate_registration(sample_registration_data)
        assert any('valid age' in e or 'Child age' in e for e in errors)

"""Daycare Service.
Read-only directory operations: search, listing detail, the lookup lists that
feed the frontend dropdowns and catalog statistics.
"""
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import func, select

from extensions import db
from models.daycare import AGE_GROUP_KEYS, PRICE_UNKNOWN, Daycare, DaycareAgeGroup
from responses import internal_error_response, not_found_response, success_response
from services.search_service import SearchFilters, icontains, search_daycares

# Placeholder values that never appear in lookup lists
_EMPTY_VALUES = ('', PRICE_UNKNOWN)


class DaycareService:

    def search(self, params):
        config = current_app.config
        filters = SearchFilters.from_params(
            params,
            default_limit=config.get('SEARCH_DEFAULT_LIMIT', 10),
            max_limit=config.get('SEARCH_MAX_LIMIT', 100),
        )
        try:
            result = search_daycares(filters)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Error searching daycares: {e}')
            return internal_error_response('Failed to search daycares')

        response = success_response([daycare.to_dict() for daycare in result.pop('listings')])
        response.body['metadata'] = {
            'pagination': result,
            'filters': filters.to_dict(),
        }
        return response

    def list_all(self):
        try:
            daycares = Daycare.query.order_by(Daycare.id).all()
        except Exception as e:
            current_app.logger.error(f'Error fetching daycares: {e}')
            return internal_error_response('Failed to fetch daycares')

        response = success_response([daycare.to_dict() for daycare in daycares])
        response.body['metadata'] = {
            'totalCount': len(daycares),
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }
        return response

    def get_by_id(self, identifier):
        """Look up by numeric id, falling back to a case-insensitive name match."""
        identifier = str(identifier or '').strip()
        try:
            daycare = None
            if identifier.isdigit():
                daycare = db.session.get(Daycare, int(identifier))
            if daycare is None and identifier:
                daycare = (Daycare.query
                           .filter(icontains(Daycare.name, identifier))
                           .order_by(Daycare.id)
                           .first())
        except Exception as e:
            current_app.logger.error(f'Error fetching daycare {identifier}: {e}')
            return internal_error_response('Failed to fetch daycare')

        if daycare is None:
            return not_found_response(f'No daycare found with ID: {identifier}')
        return success_response(daycare.to_dict())

    # Lookup lists

    def locations(self):
        return self._lookup(Daycare.city, 'locations')

    def regions(self):
        return self._lookup(Daycare.region, 'regions')

    def cities_by_region(self, region):
        region = (region or '').strip()
        if not region:
            response = success_response([])
        else:
            response = self._lookup(Daycare.city, 'cities', icontains(Daycare.region, region))
        if response.body['success']:
            response.body['count'] = len(response.body['data'])
            response.body['region'] = region or None
        return response

    def program_ages(self):
        return self._lookup(Daycare.program_age, 'program ages')

    def types_by_region_and_city(self, region=None, city=None):
        region = (region or '').strip()
        city = (city or '').strip()
        conditions = []
        if region:
            conditions.append(icontains(Daycare.region, region))
        if city:
            conditions.append(icontains(Daycare.city, city))

        response = self._lookup(Daycare.daycare_type, 'daycare types', *conditions)
        if response.body['success']:
            response.body['region'] = region or None
            response.body['city'] = city or None
        return response

    def stats(self):
        try:
            total = db.session.scalar(select(func.count(Daycare.id))) or 0
            average = db.session.scalar(select(func.avg(Daycare.rating)))
            locations = db.session.scalar(
                select(func.count(func.distinct(Daycare.city)))
                .where(Daycare.city.notin_(_EMPTY_VALUES))
            ) or 0
            served = dict(db.session.execute(
                select(DaycareAgeGroup.group, func.count(func.distinct(DaycareAgeGroup.daycare_id)))
                .where(DaycareAgeGroup.capacity > 0)
                .group_by(DaycareAgeGroup.group)
            ).all())
            cwelcc = db.session.scalar(
                select(func.count(Daycare.id)).where(Daycare.cwelcc.is_(True))) or 0
            subsidy = db.session.scalar(
                select(func.count(Daycare.id)).where(Daycare.subsidy_available.is_(True))) or 0
        except Exception as e:
            current_app.logger.error(f'Error fetching stats: {e}')
            return internal_error_response('Failed to fetch statistics')

        return success_response({
            'totalDaycares': total,
            'averageRating': round(float(average), 2) if average is not None else 0,
            'locations': locations,
            'ageGroups': {key: served.get(key, 0) for key in AGE_GROUP_KEYS},
            'cwelcc': cwelcc,
            'subsidyAvailable': subsidy,
        })

    @staticmethod
    def _lookup(column, label, *conditions):
        """Sorted distinct non-empty values of ``column``."""
        try:
            values = db.session.execute(
                select(column)
                .where(column.isnot(None), column.notin_(_EMPTY_VALUES), *conditions)
                .distinct()
                .order_by(column)
            ).scalars().all()
        except Exception as e:
            current_app.logger.error(f'Error fetching {label}: {e}')
            return internal_error_response(f'Failed to fetch {label}')

        response = success_response(list(values))
        response.body['count'] = len(values)
        return response

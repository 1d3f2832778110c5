"""Daycare search and filter engine.

Search parameters are parsed into a ``SearchFilters`` object, every filter
becomes a named ``FilterClause`` and ``DaycareQueryBuilder`` reduces the
clauses into a single SQLAlchemy predicate. Clauses that share a ``group`` are
OR-ed together before the final conjunction; everything else is AND-ed.

Malformed filter values never raise: they are ignored or defaulted.
"""
import math
import re

from flask import current_app
from sqlalchemy import and_, func, or_, select, true

from extensions import db
from models.daycare import Daycare, DaycareAgeGroup, DaycareFeature

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

AVAILABILITY_YES = 'yes'
AVAILABILITY_NO = 'no'

# Disjunction shared by the free-text and location filters.
TEXT_GROUP = 'text'

AGE_RANGE_ALIASES = {
    'infant': 'infant',
    'infants': 'infant',
    'toddler': 'toddler',
    'toddlers': 'toddler',
    'preschool': 'preschool',
    'preschools': 'preschool',
    'preschooler': 'preschool',
    'preschoolers': 'preschool',
    'kindergarten': 'kindergarten',
    'kindergartens': 'kindergarten',
    'school age': 'schoolAge',
    'school ages': 'schoolAge',
    'schoolage': 'schoolAge',
}

_TRUE_STRINGS = ('true', '1', 'yes', 'on')


# Parsing helpers

def as_text(value):
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def as_list(value):
    """Accept a list, a comma-separated string, or a list of comma-separated strings."""
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]
    result = []
    for item in items:
        if item is None:
            continue
        for part in str(item).split(','):
            part = part.strip()
            if part:
                result.append(part)
    return result


def as_float(value):
    text = as_text(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def as_positive_int(value, default):
    text = as_text(value)
    if text is None:
        return default
    try:
        number = int(text)
    except ValueError:
        return default
    return number if number > 0 else default


def is_explicitly_true(value):
    if isinstance(value, bool):
        return value
    text = as_text(value)
    return text is not None and text.lower() in _TRUE_STRINGS


def normalize_age_range(value):
    """Map requested age ranges onto canonical age-group keys, dropping unknown words."""
    keys = []
    for item in as_list(value):
        normalized = re.sub(r'[\s_-]+', ' ', item.lower()).strip()
        key = AGE_RANGE_ALIASES.get(normalized)
        if key and key not in keys:
            keys.append(key)
    return keys


def normalize_availability(value):
    text = as_text(value)
    if text is not None and text.lower() == AVAILABILITY_NO:
        return AVAILABILITY_NO
    return AVAILABILITY_YES


def _get(params, key):
    if hasattr(params, 'getlist'):
        values = params.getlist(key)
        if not values:
            return None
        return values if len(values) > 1 else values[0]
    return params.get(key)


class SearchFilters:
    """Parsed, typed view of the raw search parameters."""

    def __init__(self, q=None, location=None, region=None, price_min=None, price_max=None,
                 age_groups=None, availability=AVAILABILITY_YES, program_ages=None,
                 daycare_type=None, ward=None, features=None, cwelcc=False, subsidy=False,
                 page=DEFAULT_PAGE, limit=DEFAULT_LIMIT):
        self.q = q
        self.location = location
        self.region = region
        self.price_min = price_min
        self.price_max = price_max
        self.age_groups = age_groups or []
        self.availability = availability
        self.program_ages = program_ages or []
        self.daycare_type = daycare_type
        self.ward = ward
        self.features = features or []
        self.cwelcc = cwelcc
        self.subsidy = subsidy
        self.page = page
        self.limit = limit

    @classmethod
    def from_params(cls, params, default_limit=DEFAULT_LIMIT, max_limit=None):
        params = params or {}
        limit = as_positive_int(_get(params, 'limit'), default_limit)
        if max_limit:
            limit = min(limit, max_limit)
        return cls(
            q=as_text(_get(params, 'q')),
            location=as_text(_get(params, 'location')),
            region=as_text(_get(params, 'region')),
            price_min=as_float(_get(params, 'priceMin')),
            price_max=as_float(_get(params, 'priceMax')),
            age_groups=normalize_age_range(_get(params, 'ageRange')),
            availability=normalize_availability(_get(params, 'availability')),
            program_ages=as_list(_get(params, 'programAge')),
            daycare_type=as_text(_get(params, 'daycareType')),
            ward=as_text(_get(params, 'ward')),
            features=as_list(_get(params, 'features')),
            cwelcc=is_explicitly_true(_get(params, 'cwelcc')),
            subsidy=is_explicitly_true(_get(params, 'subsidy')),
            page=as_positive_int(_get(params, 'page'), DEFAULT_PAGE),
            limit=limit,
        )

    @property
    def offset(self):
        return (self.page - 1) * self.limit

    def to_dict(self):
        """Echo of the filters that were actually applied."""
        applied = {
            'q': self.q,
            'location': self.location,
            'region': self.region,
            'priceMin': self.price_min,
            'priceMax': self.price_max,
            'ageRange': self.age_groups or None,
            'availability': self.availability if self.age_groups else None,
            'programAge': self.program_ages or None,
            'daycareType': self.daycare_type,
            'ward': self.ward,
            'features': self.features or None,
            'cwelcc': self.cwelcc or None,
            'subsidy': self.subsidy or None,
        }
        applied = {key: value for key, value in applied.items() if value is not None}
        applied.update({'page': self.page, 'limit': self.limit})
        return applied


# Clauses

class FilterClause:
    """A named predicate over ``Daycare``.

    Clauses with the same ``group`` are combined with OR before being AND-ed
    with the remaining clauses.
    """

    def __init__(self, name, expression, group=None):
        self.name = name
        self.expression = expression
        self.group = group

    def __repr__(self):
        return f'<FilterClause {self.name}{" in " + self.group if self.group else ""}>'


def icontains(column, value):
    """Case-insensitive literal substring match."""
    escaped = value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return column.ilike(f'%{escaped}%', escape='\\')


def _capacity_available(group):
    return Daycare.age_groups.any(and_(DaycareAgeGroup.group == group, DaycareAgeGroup.capacity > 0))


def text_clause(q):
    if not q:
        return None
    return FilterClause('q', or_(
        icontains(Daycare.name, q),
        icontains(Daycare.description, q),
        Daycare.features.any(icontains(DaycareFeature.name, q)),
    ), group=TEXT_GROUP)


def location_clause(location):
    if not location:
        return None
    return FilterClause('location', or_(
        icontains(Daycare.city, location),
        icontains(Daycare.address, location),
    ), group=TEXT_GROUP)


def region_clause(region):
    if not region:
        return None
    return FilterClause('region', icontains(Daycare.region, region))


def price_clause(price_min, price_max):
    bounds = []
    if price_min is not None:
        bounds.append(Daycare.price >= price_min)
    if price_max is not None:
        bounds.append(Daycare.price <= price_max)
    if not bounds:
        return None
    return FilterClause('price', and_(*bounds))


def age_range_clause(age_groups, availability=AVAILABILITY_YES):
    """Serves at least one requested group, or (``no``) fails to serve at least one.

    A missing age-group row counts as capacity 0.
    """
    if not age_groups:
        return None
    served = [_capacity_available(group) for group in age_groups]
    if availability == AVAILABILITY_NO:
        return FilterClause('ageRange', or_(*[~condition for condition in served]))
    return FilterClause('ageRange', or_(*served))


def program_age_clause(program_ages):
    if not program_ages:
        return None
    return FilterClause('programAge', Daycare.program_age.in_(program_ages))


def daycare_type_clause(daycare_type):
    if not daycare_type:
        return None
    return FilterClause('daycareType', icontains(Daycare.daycare_type, daycare_type))


def ward_clause(ward):
    if not ward:
        return None
    return FilterClause('ward', or_(
        icontains(Daycare.ward, ward),
        icontains(Daycare.city, ward),
    ))


def features_clause(features):
    if not features:
        return None
    return FilterClause('features', Daycare.features.any(DaycareFeature.name.in_(features)))


def cwelcc_clause(enabled):
    return FilterClause('cwelcc', Daycare.cwelcc.is_(True)) if enabled else None


def subsidy_clause(enabled):
    return FilterClause('subsidy', Daycare.subsidy_available.is_(True)) if enabled else None


class DaycareQueryBuilder:
    """Collects filter clauses and reduces them into one predicate."""

    def __init__(self):
        self.clauses = []

    def add(self, clause):
        if clause is not None:
            self.clauses.append(clause)
        return self

    @property
    def names(self):
        return [clause.name for clause in self.clauses]

    def predicate(self):
        conjuncts = []
        groups = {}
        for clause in self.clauses:
            if clause.group is None:
                conjuncts.append([clause.expression])
            elif clause.group in groups:
                groups[clause.group].append(clause.expression)
            else:
                groups[clause.group] = [clause.expression]
                conjuncts.append(groups[clause.group])

        expressions = [parts[0] if len(parts) == 1 else or_(*parts) for parts in conjuncts]
        if not expressions:
            return true()
        return and_(*expressions)

    @classmethod
    def from_filters(cls, filters):
        return (cls()
                .add(text_clause(filters.q))
                .add(location_clause(filters.location))
                .add(region_clause(filters.region))
                .add(price_clause(filters.price_min, filters.price_max))
                .add(age_range_clause(filters.age_groups, filters.availability))
                .add(program_age_clause(filters.program_ages))
                .add(features_clause(filters.features))
                .add(ward_clause(filters.ward))
                .add(daycare_type_clause(filters.daycare_type))
                .add(cwelcc_clause(filters.cwelcc))
                .add(subsidy_clause(filters.subsidy)))


def build_pagination(total_count, page, limit):
    total_pages = math.ceil(total_count / limit) if limit else 0
    return {
        'totalCount': total_count,
        'currentPage': page,
        'totalPages': total_pages,
        'limit': limit,
        'hasNextPage': page < total_pages,
        'hasPreviousPage': page > 1,
    }


def search_daycares(filters):
    """Run the count and page queries for ``filters``.

    Returns a dict with ``listings`` (Daycare instances for the requested page)
    plus the pagination metadata from ``build_pagination``.
    """
    builder = DaycareQueryBuilder.from_filters(filters)
    predicate = builder.predicate()
    current_app.logger.debug(f'Daycare search clauses: {builder.names or "none"}')

    total_count = db.session.scalar(select(func.count(Daycare.id)).where(predicate)) or 0
    listings = []
    # Pages past the end skip the query; a huge page would overflow OFFSET.
    if filters.offset < total_count:
        listings = db.session.execute(
            select(Daycare)
            .where(predicate)
            .order_by(Daycare.id)
            .offset(filters.offset)
            .limit(filters.limit)
        ).scalars().all()

    result = build_pagination(total_count, filters.page, filters.limit)
    result['listings'] = listings
    return result

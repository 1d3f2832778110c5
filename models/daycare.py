"""Daycare listing model definition.
Defines the searchable Daycare catalog entity together with its per-age-group
capacity rows and free-text feature tags.
"""
from datetime import datetime
from extensions import db

# Fixed age bands, in display order. Capacity > 0 means the band is served.
AGE_GROUP_KEYS = ('infant', 'toddler', 'preschool', 'kindergarten', 'schoolAge')

PRICE_UNKNOWN = 'NO'


class Daycare(db.Model):
    __tablename__ = 'daycares'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, default='')

    # Geography: region > city > ward
    address = db.Column(db.String(255), nullable=False)
    city = db.Column(db.String(120), nullable=False, index=True)
    region = db.Column(db.String(120), default='', index=True)
    ward = db.Column(db.String(120), default='', index=True)
    latitude = db.Column(db.Float, default=0)
    longitude = db.Column(db.Float, default=0)

    # Contact
    phone = db.Column(db.String(50), default='')
    email = db.Column(db.String(255), default='')
    website = db.Column(db.String(255), default='')
    contact_us_page = db.Column(db.String(255), default='')
    forms_link = db.Column(db.String(255), default='')

    # Pricing
    price = db.Column(db.Float, default=0, index=True)
    price_string = db.Column(db.String(50), default=PRICE_UNKNOWN)
    registration_fee = db.Column(db.Float, default=0)

    # Categorical attributes
    daycare_type = db.Column(db.String(120), default='', index=True)
    program_age = db.Column(db.String(120), default='', index=True)
    cwelcc = db.Column(db.Boolean, default=False, nullable=False, index=True)
    subsidy_available = db.Column(db.Boolean, default=False, nullable=False, index=True)
    hours = db.Column(db.String(120), default='')
    registration_info = db.Column(db.Text, default='')
    languages = db.Column(db.JSON, default=list)
    special_needs = db.Column(db.Boolean, default=False)
    transportation = db.Column(db.Boolean, default=False)
    meals = db.Column(db.Boolean, default=False)
    nap_time = db.Column(db.Boolean, default=False)
    outdoor_space = db.Column(db.Boolean, default=False)

    # Reviews
    rating = db.Column(db.Float, default=0, index=True)
    review_count = db.Column(db.Integer, default=0)
    google_review_summary = db.Column(db.Text, default='')

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    age_groups = db.relationship('DaycareAgeGroup', backref='daycare', lazy='selectin',
                                 cascade='all, delete-orphan')
    features = db.relationship('DaycareFeature', backref='daycare', lazy='selectin',
                               cascade='all, delete-orphan', order_by='DaycareFeature.id')

    def set_capacity(self, group, capacity):
        if group not in AGE_GROUP_KEYS:
            raise ValueError(f'Unknown age group: {group}')
        for age_group in self.age_groups:
            if age_group.group == group:
                age_group.capacity = capacity
                return age_group
        age_group = DaycareAgeGroup(group=group, capacity=capacity)
        self.age_groups.append(age_group)
        return age_group

    def capacity_for(self, group):
        for age_group in self.age_groups:
            if age_group.group == group:
                return age_group.capacity or 0
        return 0

    def serves(self, group):
        return self.capacity_for(group) > 0

    @property
    def feature_names(self):
        return [feature.name for feature in self.features]

    def to_dict(self) -> dict:
        groups = {age_group.group: age_group for age_group in self.age_groups}
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'address': self.address,
            'city': self.city,
            'region': self.region,
            'ward': self.ward,
            'coordinates': {'lat': self.latitude, 'lng': self.longitude},
            'phone': self.phone,
            'email': self.email,
            'website': self.website,
            'contactUsPage': self.contact_us_page,
            'formsLink': self.forms_link,
            'price': self.price,
            'priceString': self.price_string or PRICE_UNKNOWN,
            'registrationFee': self.registration_fee,
            'daycareType': self.daycare_type,
            'programAge': self.program_age,
            'cwelcc': self.cwelcc,
            'subsidyAvailable': self.subsidy_available,
            'hours': self.hours,
            'registrationInfo': self.registration_info,
            'languages': self.languages or [],
            'specialNeeds': self.special_needs,
            'transportation': self.transportation,
            'meals': self.meals,
            'napTime': self.nap_time,
            'outdoorSpace': self.outdoor_space,
            'rating': self.rating,
            'reviewCount': self.review_count,
            'googleReviewSummary': self.google_review_summary,
            'features': self.feature_names,
            'ageGroups': {
                key: {'capacity': groups[key].capacity or 0} if key in groups else None
                for key in AGE_GROUP_KEYS
            },
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f'<Daycare {self.name} - {self.city}>'


class DaycareAgeGroup(db.Model):
    __tablename__ = 'daycare_age_groups'
    __table_args__ = (db.UniqueConstraint('daycare_id', 'group', name='uq_daycare_age_group'),)

    id = db.Column(db.Integer, primary_key=True)
    daycare_id = db.Column(db.Integer, db.ForeignKey('daycares.id'), nullable=False, index=True)
    group = db.Column(db.String(20), nullable=False)
    capacity = db.Column(db.Integer, default=0)

    def __repr__(self) -> str:
        return f'<DaycareAgeGroup {self.daycare_id} {self.group}={self.capacity}>'


class DaycareFeature(db.Model):
    __tablename__ = 'daycare_features'

    id = db.Column(db.Integer, primary_key=True)
    daycare_id = db.Column(db.Integer, db.ForeignKey('daycares.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False, index=True)

    def __repr__(self) -> str:
        return f'<DaycareFeature {self.name}>'

#!/usr/bin/env python3
"""
Seed script for the daycare directory database.
This script populates the database with a small set of demo listings.
"""

import sys
from app import create_app
from extensions import db
from models import Daycare, DaycareFeature
from services.pricing import format_price_string, parse_price

DEMO_DAYCARES = [
    {
        'name': 'Little Sprouts Early Learning',
        'description': 'Play-based program with a large outdoor garden.',
        'address': '120 King St W', 'city': 'Toronto', 'region': 'Toronto', 'ward': 'Spadina-Fort York',
        'monthly_fee': '1400 - 1800/month', 'daycare_type': 'Licensed Centre', 'program_age': 'Infant to Preschool',
        'cwelcc': True, 'subsidy_available': True, 'rating': 4.6, 'review_count': 38,
        'capacity': {'infant': 10, 'toddler': 15, 'preschool': 24},
        'features': ['Outdoor Play', 'Meals Included'],
    },
    {
        'name': 'Maple Grove Montessori',
        'description': 'Montessori classrooms for toddlers and preschoolers.',
        'address': '45 Maple Ave', 'city': 'Mississauga', 'region': 'Peel', 'ward': 'Ward 7',
        'monthly_fee': '$1500', 'daycare_type': 'Montessori', 'program_age': 'Toddler to Kindergarten',
        'cwelcc': False, 'subsidy_available': True, 'rating': 4.2, 'review_count': 17,
        'capacity': {'toddler': 12, 'preschool': 20, 'kindergarten': 16},
        'features': ['Montessori', 'French Immersion'],
    },
    {
        'name': 'Sunrise Home Child Care',
        'description': 'Small home-based care with flexible hours.',
        'address': '9 Birch Cres', 'city': 'Brampton', 'region': 'Peel', 'ward': 'Ward 3',
        'monthly_fee': 'N/A', 'daycare_type': 'Home Child Care', 'program_age': 'School Age',
        'cwelcc': True, 'subsidy_available': False, 'rating': 3.9, 'review_count': 5,
        'capacity': {'schoolAge': 6, 'infant': 0},
        'features': ['Extended Hours'],
    },
    {
        'name': 'Harbourfront Kids Club',
        'description': 'Before and after school program near the waterfront.',
        'address': '230 Queens Quay W', 'city': 'Toronto', 'region': 'Toronto', 'ward': 'Spadina-Fort York',
        'monthly_fee': '475$ - 500$', 'daycare_type': 'Licensed Centre', 'program_age': 'School Age',
        'cwelcc': True, 'subsidy_available': True, 'rating': 4.8, 'review_count': 52,
        'capacity': {'kindergarten': 20, 'schoolAge': 30},
        'features': ['Outdoor Play', 'Homework Help'],
    },
]


def build_daycare(record):
    """Build a Daycare (with age-group and feature rows) from a demo or import record."""
    fee = record.get('monthly_fee')
    daycare = Daycare(
        name=record['name'],
        description=record.get('description', ''),
        address=record['address'],
        city=record['city'],
        region=record.get('region', ''),
        ward=record.get('ward', ''),
        price=parse_price(fee),
        price_string=format_price_string(fee),
        daycare_type=record.get('daycare_type', ''),
        program_age=record.get('program_age', ''),
        cwelcc=record.get('cwelcc', False),
        subsidy_available=record.get('subsidy_available', False),
        rating=record.get('rating', 0),
        review_count=record.get('review_count', 0),
    )
    for group, capacity in record.get('capacity', {}).items():
        daycare.set_capacity(group, capacity)
    for name in record.get('features', []):
        daycare.features.append(DaycareFeature(name=name))
    return daycare


def seed_daycares(app=None):
    """Seed the database with demo daycare listings. Returns the number added."""
    print("🌱 Starting database seeding...")
    app = app or create_app()

    with app.app_context():
        try:
            db.create_all()
            print("✅ Database tables created/verified")

            initial_count = Daycare.query.count()
            print(f"📊 Current daycares in database: {initial_count}")

            added = 0
            for record in DEMO_DAYCARES:
                exists = Daycare.query.filter_by(name=record['name'], address=record['address']).first()
                if exists:
                    continue
                db.session.add(build_daycare(record))
                added += 1
            db.session.commit()

            print("✅ Seeding completed successfully!")
            print(f"📈 Added {added} new daycares")
            print(f"📊 Total daycares in database: {Daycare.query.count()}")
            return added
        except Exception as e:
            print(f"❌ Error during seeding: {e}")
            db.session.rollback()
            sys.exit(1)


def clear_daycares(app=None):
    """Remove every daycare listing from the database."""
    app = app or create_app()

    with app.app_context():
        try:
            daycares = Daycare.query.all()
            if not daycares:
                print("ℹ️  No daycares to clear")
                return 0

            # Delete through the ORM so age-group and feature rows cascade
            for daycare in daycares:
                db.session.delete(daycare)
            db.session.commit()
            print(f"🗑️  Cleared {len(daycares)} daycares from database")
            return len(daycares)
        except Exception as e:
            print(f"❌ Error clearing daycares: {e}")
            db.session.rollback()
            sys.exit(1)


def main():
    """Main function to handle command line arguments."""
    if len(sys.argv) > 1:
        if sys.argv[1] == '--clear':
            print("🗑️  Clearing daycares...")
            clear_daycares()
            return
        elif sys.argv[1] == '--help' or sys.argv[1] == '-h':
            print("Daycare Directory Database Seeder")
            print("Usage:")
            print("  python seed.py          - Seed demo daycares")
            print("  python seed.py --clear  - Clear all daycares")
            print("  python seed.py --help   - Show this help message")
            return
        else:
            print(f"❌ Unknown argument: {sys.argv[1]}")
            print("Use 'python seed.py --help' for usage information")
            sys.exit(1)

    # Default action: seed the database
    seed_daycares()


if __name__ == '__main__':
    main()

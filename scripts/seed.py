#!/usr/bin/env python3
"""Seed script – populates the database with realistic dummy companies.

Run after migrations:
    python -m scripts.seed
"""

from __future__ import annotations

import random
import uuid

from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.config import settings
from app.models import INDUSTRIES, Base, Company, CompanyLocation
from app.services.derived import current_year
from app.services.validation import constraint_errors, normalize_fields, to_columns

fake = Faker()
Faker.seed(42)
random.seed(42)

N_COMPANIES = 25


def fake_company_fields() -> dict:
    """One create body (wire names) that satisfies every field constraint."""
    name = fake.unique.company()[:100]
    slug = "".join(ch for ch in name.lower() if ch.isalnum())[:30] or "company"
    fields = {
        "name": name,
        "description": fake.paragraph(nb_sentences=3)[:1000],
        "industry": random.choice(INDUSTRIES),
        "foundedYear": random.randint(1900, current_year()),
        "location": [fake.city() for _ in range(random.randint(1, 3))],
        "website": f"{slug}.com",
        "email": f"contact@{slug}.com",
        "phone": f"+1{random.randint(2000000000, 9999999999)}",
        "employees": random.choice([None, random.randint(1, 9), random.randint(10, 5_000), random.randint(5_000, 200_000)]),
        "isActive": random.random() > 0.15,
        "headquarters": fake.city(),
        "revenue": round(random.uniform(1e5, 5e10), 2),
    }
    return normalize_fields(fields)


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_companies(session: Session, count: int = N_COMPANIES) -> list[Company]:
    companies: list[Company] = []
    used_emails: set[str] = set()
    while len(companies) < count:
        fields = fake_company_fields()
        if fields["email"] in used_emails or constraint_errors(fields):
            continue
        used_emails.add(fields["email"])
        company = Company(id=uuid.uuid4(), **to_columns(fields))
        session.add(company)
        companies.append(company)
    session.flush()
    return companies


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    print("🌱  Seeding database …")
    engine = create_engine(settings.database_url_sync, echo=False)

    # Create all tables (fallback if migrations haven't run)
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        # Wipe existing data
        session.execute(CompanyLocation.__table__.delete())
        session.execute(Company.__table__.delete())
        session.commit()

        companies = seed_companies(session)
        print(f"  ✅ {len(companies)} companies")

        session.commit()

    print("🎉  Seeding complete!")


if __name__ == "__main__":
    main()

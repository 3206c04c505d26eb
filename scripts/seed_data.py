#!/usr/bin/env python3
"""
Seed script: creates many users via the API (no direct DB).
Every created user also publishes a UserCreated event; run the Celery worker to see them consumed.
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --users 100
"""

import argparse
import random

import httpx

API_BASE = "http://localhost:8000/api/v1"

FIRST_NAMES = ["Ana", "Bruno", "Chen", "Dara", "Elif", "Farid", "Greta", "Hugo", "Ines", "Jin"]
LAST_NAMES = ["Garcia", "Smith", "Zhang", "Novak", "Yilmaz", "Rossi", "Silva", "Kim", "Moreau", "Khan"]
COUNTRIES = ["ES", "GB", "FR", "DE", "IT", "PT", "US", "CN", "TR", "BR"]


def random_user(i: int) -> dict:
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return {
        "first_name": first,
        "last_name": last,
        "nick_name": f"{first.lower()}{i}",
        "email": f"user{i}@example.com",
        "password": "password123",
        "country": random.choice(COUNTRIES),
    }


def main():
    ap = argparse.ArgumentParser(description="Seed users via API")
    ap.add_argument("--users", type=int, default=30, help="Number of users to create")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    created = 0
    existing = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        print(f"Creating {args.users} users...")
        for i in range(1, args.users + 1):
            payload = random_user(i)
            try:
                r = client.post("/users", json=payload)
                if r.status_code == 201:
                    created += 1
                elif r.status_code == 409:
                    existing += 1
                else:
                    errors.append(f"Create {payload['email']}: {r.status_code} {r.text[:80]}")
            except httpx.HTTPError as e:
                errors.append(f"Create {payload['email']}: {e}")
            if i % 10 == 0:
                print(f"  ... {i} users")

        r = client.get("/users", params={"page_size": 1})
        total = r.json().get("total_records") if r.status_code == 200 else "?"

    print(f"\nDone. Created: {created}, already present: {existing}, total in service: {total}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")


if __name__ == "__main__":
    main()

# scripts/seed_users.py
from __future__ import annotations

import argparse

from sqlalchemy import select

from crm.core.db import SessionLocal
from crm.core.security import hash_password
from crm.models.user import Role, User

SEED_USERS = [
    ("admin@crm.local", "Иванов Петр Сергеевич", Role.admin),
    ("sales@crm.local", "Сидорова Анна Михайловна", Role.sales_manager),
    ("spec1@crm.local", "Козлов Дмитрий Андреевич", Role.specialist),
    ("spec2@crm.local", "Морозова Елена Викторовна", Role.specialist),
    ("designer1@crm.local", "Петрова Мария Алексеевна", Role.designer),
    ("lead.designer@crm.local", "Волков Артем Игоревич", Role.lead_designer),
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Create one user per role (idempotent).")
    parser.add_argument("--password", default="password123", help="password for every seeded user")
    args = parser.parse_args()

    with SessionLocal() as db:
        for email, full_name, role in SEED_USERS:
            existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
            if existing is not None:
                print(f"[skip] {email} ({existing.role})")
                continue
            db.add(
                User(
                    email=email,
                    password_hash=hash_password(args.password),
                    full_name=full_name,
                    role=role.value,
                )
            )
            print(f"[ok] {email} -> {role.value}")
        db.commit()


if __name__ == "__main__":
    main()

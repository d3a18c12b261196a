"""
ADMIN WHITELIST HELPER
Quick script to manage who becomes an admin on first sign-in.

Usage:
    python manage_admins.py --add "editor@example.com"
    python manage_admins.py --list
    python manage_admins.py --remove "editor@example.com"
    python manage_admins.py --promote "editor@example.com"
"""

import sys
import os

# Add the app directory to the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import func

from app.database import SessionLocal, Base, engine
from app.models.admin_whitelist import AdminWhitelist
from app.models.profile import Profile, ROLE_ADMIN


def add_admin(email):
    """Whitelist an email"""
    db = SessionLocal()
    email = email.strip().lower()

    try:
        existing = db.query(AdminWhitelist).filter(AdminWhitelist.email == email).first()
        if existing:
            print(f"❌ '{email}' is already whitelisted!")
            return False

        db.add(AdminWhitelist(email=email))
        db.commit()

        print(f"✅ '{email}' whitelisted. New profiles with this email will be admins.")
        return True
    finally:
        db.close()


def list_admins():
    """List whitelisted emails and current admin profiles"""
    db = SessionLocal()

    try:
        entries = db.query(AdminWhitelist).order_by(AdminWhitelist.email).all()
        admins = db.query(Profile).filter(Profile.role == ROLE_ADMIN).all()

        print("\n📋 ADMIN WHITELIST:\n")
        if not entries:
            print("No whitelisted emails.")
        for w in entries:
            added = w.created_at.strftime("%Y-%m-%d") if w.created_at else "-"
            print(f"{w.email:<40} {added:<12}")

        print("\n👤 ADMIN PROFILES:\n")
        if not admins:
            print("No admin profiles.")
        for p in admins:
            print(f"{p.id:<6} {p.email:<40} {p.username or '-':<20}")

        print()
    finally:
        db.close()


def remove_admin(email):
    """Remove an email from the whitelist (existing roles are untouched)"""
    db = SessionLocal()
    email = email.strip().lower()

    try:
        entry = db.query(AdminWhitelist).filter(AdminWhitelist.email == email).first()
        if not entry:
            print(f"❌ '{email}' not found in whitelist!")
            return False

        db.delete(entry)
        db.commit()

        print(f"✅ '{email}' removed from whitelist")
        return True
    finally:
        db.close()


def promote_profile(email):
    """Give an existing profile the admin role"""
    db = SessionLocal()
    email = email.strip().lower()

    try:
        profiles = db.query(Profile).filter(func.lower(Profile.email) == email).all()
        if not profiles:
            print(f"❌ No profile with email '{email}'!")
            return False

        for p in profiles:
            p.role = ROLE_ADMIN
        db.commit()

        print(f"✅ {len(profiles)} profile(s) with '{email}' promoted to admin")
        return True
    finally:
        db.close()


COMMANDS = {
    "--add": add_admin,
    "--remove": remove_admin,
    "--promote": promote_profile,
}


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    command = sys.argv[1]

    if command == "--list":
        list_admins()

    elif command in COMMANDS:
        if len(sys.argv) < 3:
            print(f"Usage: python manage_admins.py {command} <email>")
            sys.exit(1)
        ok = COMMANDS[command](sys.argv[2])
        sys.exit(0 if ok else 1)

    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)

"""
Create an admin account, or promote an existing account to ADMIN.
Role changes are deliberately not exposed through the API; this script is the out-of-band path.

Run from project root:
  python scripts/create_admin.py admin@arivelab.com --password 'S3cure-pass!' --name "Lab Admin"
  python scripts/create_admin.py member@arivelab.com --promote
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from arivelab.database import SessionLocal
from arivelab.models.user import User, UserRole, AccountStatus
from arivelab.services.auth import get_password_hash


def main():
    parser = argparse.ArgumentParser(description="Create or promote an Arive Lab admin account")
    parser.add_argument("email", type=str, help="Account email")
    parser.add_argument("--password", type=str, default=None, help="Password for a new account")
    parser.add_argument("--name", type=str, default="Administrator", help="Display name for a new account")
    parser.add_argument("--promote", action="store_true", help="Promote an existing account to ADMIN")
    args = parser.parse_args()

    email = args.email.strip().lower()
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            if not args.promote:
                print(f"Account already exists: {email} (role={user.role.value}, status={user.status.value}). Use --promote.")
                sys.exit(1)
            user.role = UserRole.ADMIN
            user.status = AccountStatus.APPROVED
            db.commit()
            print(f"Promoted {email} to ADMIN (status APPROVED)")
            return
        if not args.password:
            print("--password is required when creating a new account")
            sys.exit(1)
        db.add(User(
            email=email,
            hashed_password=get_password_hash(args.password),
            name=args.name,
            role=UserRole.ADMIN,
            status=AccountStatus.APPROVED,
        ))
        db.commit()
        print(f"Created admin: {email}")
    finally:
        db.close()


if __name__ == "__main__":
    main()

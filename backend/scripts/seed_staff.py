#!/usr/bin/env python
"""Idempotent seed script for staff accounts.

Usage:
    python backend/scripts/seed_staff.py                                  # seed the initial admin
    python backend/scripts/seed_staff.py --email drop@example.com --role DROP_APP --name "Drop-APP Staff"
    python backend/scripts/seed_staff.py --list                           # print accounts after seeding
    python backend/scripts/seed_staff.py --dry-run                        # run logic then rollback (no DB changes)
"""
from __future__ import annotations
import os, sys, argparse, textwrap, uuid
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from repair_tracker import create_app, get_db  # type: ignore
from repair_tracker.constants.statuses import ALL_ROLES, ROLE_ADMIN
from repair_tracker.models.authz import Base, StaffUser


def ensure_staff_user(session, email: str, name: str, role: str, password: str, uid: str = None):
    """Create the account if missing; returns (user, created)."""
    existing = session.execute(select(StaffUser).where(StaffUser.email==email)).scalar_one_or_none()
    if existing:
        return existing, False
    user = StaffUser(id=uid or uuid.uuid4().hex, email=email, display_name=name, role=role, is_active=True, password_hash='')
    user.set_password(password)
    session.add(user)
    session.flush()
    return user, True


def print_accounts(session):
    rows = session.execute(select(StaffUser).order_by(StaffUser.email)).scalars().all()
    if not rows:
        print("[INFO] No accounts present.")
        return
    email_w = max(len(r.email) for r in rows)
    print(f"{'Email'.ljust(email_w)} | Role     | Active")
    print('-' * (email_w + 22))
    for r in rows:
        print(f"{r.email.ljust(email_w)} | {r.role.ljust(8)} | {'yes' if r.is_active else 'no'}")


def run_seed(session, email: str, name: str, role: str, password: str, dry_run: bool = False,
             list_accounts: bool = False):
    """Seed one account and commit, or roll back when dry_run. Returns created."""
    try:
        user, created = ensure_staff_user(session, email, name, role, password)
        if dry_run:
            session.rollback()
            print(f"[DRY-RUN] (rolled back) Would create {email}: {created}")
        else:
            session.commit()
            status = 'Created' if created else 'Already present'
            print(f"[DONE] {status}: {user.email} ({user.role})")
        if list_accounts:
            print_accounts(session)
    except SQLAlchemyError:
        session.rollback()
        raise
    return created


def parse_args():
    p = argparse.ArgumentParser(
        description="Seed staff accounts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed admin: seed_staff.py\n  dry run: seed_staff.py --dry-run\n  list: seed_staff.py --list\n""")
    )
    p.add_argument('--email', default=os.getenv('SEED_ADMIN_EMAIL', 'admin@example.com'))
    p.add_argument('--name', default='Administrator')
    p.add_argument('--role', default=ROLE_ADMIN, choices=ALL_ROLES)
    p.add_argument('--password', default=os.getenv('SEED_ADMIN_PASSWORD', 'ChangeMe123!'))
    p.add_argument('--list', action='store_true', help='Print accounts after seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    return p.parse_args()


def main():
    args = parse_args()
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            session.execute(text('SELECT 1 FROM staff_users LIMIT 1'))
        except SQLAlchemyError:
            # Auto-create schema for bootstrap; in real env prefer alembic upgrade
            session.rollback()
            Base.metadata.create_all(session.get_bind())
        try:
            run_seed(session, args.email, args.name, args.role, args.password,
                     dry_run=args.dry_run, list_accounts=args.list)
        finally:
            session.close()

if __name__ == '__main__':
    main()

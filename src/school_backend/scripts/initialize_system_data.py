#!/usr/bin/env python3
"""
Initialize the permission catalog: categories, permissions, system roles and
the baseline permissions of each role.
Run after the database schema exists. Safe to run repeatedly.
"""

from typing import Dict
from dotenv import load_dotenv
from sqlalchemy.orm import Session

# Load environment variables
load_dotenv()

from school_backend.database import Database
from school_backend.model.auth import Permission, PermissionCategory, Role, RolePermission
from school_backend.permissions.catalog import (
    PERMISSION_CATEGORIES, PERMISSIONS, ROLE_BASELINES, ROLE_DISPLAY_NAMES, RoleName
)
from school_backend.settings import settings


def initialize_permission_categories(db: Session) -> Dict[str, PermissionCategory]:
    """Create missing permission categories."""
    print("🗂️  Checking permission categories...")

    categories = {c.name: c for c in db.query(PermissionCategory).all()}

    created = 0
    for name, display_name, description in PERMISSION_CATEGORIES:
        if name in categories:
            continue
        category = PermissionCategory(
            name=name,
            display_name=display_name,
            description=description,
            is_system_category=True
        )
        db.add(category)
        categories[name] = category
        created += 1

    db.flush()
    print(f"   ✅ {len(PERMISSION_CATEGORIES)} categories ({created} created)")

    return categories


def initialize_permissions(db: Session, categories: Dict[str, PermissionCategory]) -> Dict[str, Permission]:
    """Create missing permissions and attach them to their category."""
    print("🔑 Checking permissions...")

    permissions = {p.name: p for p in db.query(Permission).all()}

    created = 0
    for name, category_name, display_name in PERMISSIONS:
        category = categories[category_name]
        permission = permissions.get(name)

        if permission is None:
            permission = Permission(name=name, display_name=display_name)
            db.add(permission)
            permissions[name] = permission
            created += 1

        permission.category = category_name
        permission.permission_category = category

    db.flush()
    print(f"   ✅ {len(PERMISSIONS)} permissions ({created} created)")

    return permissions


def initialize_roles(db: Session) -> Dict[str, Role]:
    """Create the system roles."""
    print("👥 Checking system roles...")

    roles = {r.name: r for r in db.query(Role).all()}

    for role_name in RoleName:
        display_name, description = ROLE_DISPLAY_NAMES[role_name]
        role = roles.get(role_name.value)

        if role is None:
            role = Role(name=role_name.value, display_name=display_name, description=description)
            db.add(role)
            roles[role_name.value] = role
            print(f"   ✅ Created role: {role_name.value}")
        else:
            print(f"   ⚠️  Role already exists: {role_name.value}")

        role.is_system_role = True

    db.flush()
    return roles


def initialize_role_baselines(db: Session, roles: Dict[str, Role], permissions: Dict[str, Permission]):
    """Add missing baseline assignments; assignments made later by an administrator stay."""
    print("🧩 Checking role baselines...")

    for role_name, baseline in ROLE_BASELINES.items():
        role = roles[role_name.value]

        assigned = {
            row[0] for row in db.query(RolePermission.permission_id).filter(RolePermission.role_id == role.id).all()
        }

        missing = [permissions[name] for name in sorted(baseline) if permissions[name].id not in assigned]
        for permission in missing:
            db.add(RolePermission(role_id=role.id, permission_id=permission.id))

        print(f"   ✅ {role_name.value}: {len(baseline)} permissions ({len(missing)} added)")

    db.flush()


def initialize_system_data(db: Session):
    """Run every initialization step in one transaction."""
    try:
        categories = initialize_permission_categories(db)
        permissions = initialize_permissions(db, categories)
        roles = initialize_roles(db)
        initialize_role_baselines(db, roles, permissions)
        db.commit()
    except Exception:
        db.rollback()
        raise


def main():
    """Initialize all system data."""
    print("🚀 System Data Initialization")
    print("=" * 50)

    database = Database(settings.database_url)

    try:
        with database.session() as db:
            initialize_system_data(db)

        print("=" * 50)
        print("✅ System initialization completed successfully!")

    except Exception as e:
        print(f"❌ Error during initialization: {e}")
        raise

    finally:
        database.dispose()


if __name__ == "__main__":
    main()

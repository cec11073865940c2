"""Seed script to create initial data for development/demo."""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from formdesk.database import SessionLocal, engine, Base
from formdesk.models.assignment import AdminAssignment
from formdesk.models.template import FormTemplate
from formdesk.models.user import User, UserRole
from formdesk.services.auth import AuthService

ACCOUNTS = [
    ("super@example.com", "super12345", UserRole.SUPER_ADMIN, {}),
    ("admin@example.com", "admin12345", UserRole.ADMIN, {"access_level": "partial"}),
    ("user@example.com", "user123456", UserRole.USER, {}),
]

INTAKE_FIELDS = [
    {"id": "intro", "type": "header", "label": "Personal details", "headerLevel": 2,
     "description": "Tell us who you are.", "required": False, "sensitive": False},
    {"id": "full_name", "type": "text", "label": "Full name", "placeholder": "Jane Doe",
     "required": True, "sensitive": False},
    {"id": "age", "type": "number", "label": "Age", "required": False, "sensitive": False},
    {"id": "ssn", "type": "text", "label": "Social security number", "required": False,
     "sensitive": True},
    {"id": "divider", "type": "separator", "label": "", "required": False, "sensitive": False},
    {"id": "department", "type": "dropdown", "label": "Department", "required": True,
     "sensitive": False, "options": [
         {"label": "Engineering", "value": "engineering"},
         {"label": "Human Resources", "value": "human_resources"},
     ]},
    {"id": "notes", "type": "textarea", "label": "Anything else?", "required": False,
     "sensitive": False},
    {"id": "consent", "type": "boolean", "label": "I confirm the above is accurate",
     "required": True, "sensitive": False},
]


def seed_database():
    """Create initial seed data."""
    db = SessionLocal()

    try:
        print("Creating users...")
        accounts = {}
        for email, password, role, metadata in ACCOUNTS:
            account = db.query(User).filter(User.email == email).first()
            if not account:
                account = User(
                    email=email,
                    hashed_password=AuthService.get_password_hash(password),
                    role=role,
                    user_metadata=metadata,
                )
                db.add(account)
                print(f"  Created {role.value}: {email} / {password}")
            accounts[role] = account
        db.commit()

        admin = accounts[UserRole.ADMIN]
        user = accounts[UserRole.USER]
        edge = db.query(AdminAssignment).filter(
            AdminAssignment.admin_id == admin.id,
            AdminAssignment.user_id == user.id
        ).first()
        if not edge:
            db.add(AdminAssignment(admin_id=admin.id, user_id=user.id))
            print(f"  Assigned {user.email} to {admin.email}")

        print("\nCreating templates...")
        template = db.query(FormTemplate).filter(FormTemplate.name == "Intake").first()
        if not template:
            db.add(FormTemplate(
                name="Intake",
                fields=INTAKE_FIELDS,
                is_predefined=True,
                created_by=accounts[UserRole.SUPER_ADMIN].id,
            ))
            print("  Created template: Intake")
        else:
            template.fields = INTAKE_FIELDS
            print("  Updated template: Intake")

        db.commit()
        print("\nSeed data created successfully!")

    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    # Create tables
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    # Seed data
    seed_database()

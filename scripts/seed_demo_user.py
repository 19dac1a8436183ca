import sys
import os
from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from freelancehub.core.security import create_access_token
from freelancehub.db.session import engine, init_db
from freelancehub.models.user import User
from freelancehub.services.demo_data import DemoDataSeeder

def create_demo_user():
    print("--- Demo User Creation ---")

    email = "demo@example.com"
    full_name = "Demo Freelancer"

    init_db()
    with Session(engine) as session:
        user = session.exec(select(User).where(User.email == email)).first()

        if user:
            print(f"User with email {email} already exists.")
        else:
            print(f"Creating user {email}...")
            user = User(email=email, full_name=full_name)
            session.add(user)
            session.commit()
            session.refresh(user)

        result = DemoDataSeeder(session).seed(owner_id=user.id)
        if result.ok:
            print(f"Seeded {result.data.clients_created} clients and {result.data.projects_created} projects.")
        else:
            print(f"Skipped seeding: {result.error}")

        print(f"User id: {user.id}")
        print(f"Access token: {create_access_token(user.id)}")

if __name__ == "__main__":
    create_demo_user()

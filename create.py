# create.py - bootstrap the schema, seed organizations and create an admin
from getpass import getpass
from taskcoach import create_app
from taskcoach.extensions import db
from taskcoach.errors import DuplicateUsername, ValidationError
from taskcoach.models.enums import Role
from taskcoach.models.organization import Organization
from taskcoach.services import admin_service, credential_service


def main():
    app = create_app()
    with app.app_context():
        db.create_all()

        orgs = input("Organizations to create (comma separated, optional): ").strip()
        for name in (n.strip() for n in orgs.split(",")):
            if name and not Organization.query.filter_by(name=name).first():
                admin_service.create_organization(name)

        username = input("Admin username: ").strip()
        password = getpass("Password: ")

        try:
            user = credential_service.register(username, password)
        except (DuplicateUsername, ValidationError) as e:
            print(e.message)
            return

        user.role = Role.ADMIN
        db.session.commit()
        print(f"Admin user {username} created successfully.")

if __name__ == "__main__":
    main()

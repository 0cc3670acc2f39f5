# Overview: ORM models. The claims table is introspected at runtime and has no model here.

from .extensions import db


ADMIN_ROLE = "admin"


def compose_full_name(first_name: str | None, last_name: str | None) -> str:
    """Full name as shown in the reporter column: 'first last', trimmed."""
    return f"{first_name or ''} {last_name or ''}".strip()


class User(db.Model):
    """
    User accounts for authentication and attribution.

    Claims reference their author by full name, not by id, so the composed
    full name doubles as the ownership key.
    """
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(64), nullable=False, unique=True, index=True)

    # Plaintext, or a bcrypt hash (see auth_service.verify_password)
    password = db.Column(db.String(255), nullable=False)

    first_name = db.Column(db.String(120), nullable=False, default="")
    last_name = db.Column(db.String(120), nullable=False, default="")

    role = db.Column(db.String(30), nullable=False, default="user")
    department = db.Column(db.String(120), nullable=True)

    @property
    def full_name(self) -> str:
        return compose_full_name(self.first_name, self.last_name)

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "fullName": self.full_name,
            "role": self.role,
            "department": self.department or "",
        }

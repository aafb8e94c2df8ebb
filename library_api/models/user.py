from library_api.extensions import db
from library_api.utils.clock import utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(30), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash

    is_admin = db.Column(db.Boolean, nullable=False, default=False)

    # Fernet ile şifrelenmiş not, düz metin asla saklanmaz
    encrypted_notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_public_dict(self):
        return {"id": self.id, "username": self.username, "isAdmin": bool(self.is_admin)}

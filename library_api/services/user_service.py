from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from library_api.errors import InvalidCredentials, UsernameTaken, UserNotFound
from library_api.models.user import User
from library_api.repositories.user_repo import UserRepo
from library_api.utils.encryption import decrypt_text, encrypt_text
from library_api.utils.transaction import atomic


class UserService:
    def __init__(self, session):
        self.session = session
        self.users = UserRepo(session)

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(
            identity=str(user.id),
            additional_claims={"username": user.username, "isAdmin": bool(user.is_admin)},
        )

    def _auth_payload(self, user: User):
        return {"user": user.to_public_dict(), "token": self.issue_token(user)}

    def register(self, username: str, password: str):
        if self.users.get_by_username(username):
            raise UsernameTaken()

        user = User(username=username, password=generate_password_hash(password), is_admin=False)
        try:
            with atomic(self.session):
                self.users.add(user)
        except IntegrityError as e:
            # aynı kullanıcı adı eşzamanlı kaydedildi
            raise UsernameTaken() from e

        current_app.logger.info(f"[auth] registered user id={user.id} username={user.username}")
        return self._auth_payload(user)

    def login(self, username: str, password: str):
        user = self.users.get_by_username(username)
        if not user or not check_password_hash(user.password, password):
            current_app.logger.warning(f"[auth] failed login for username={username}")
            raise InvalidCredentials()
        return self._auth_payload(user)

    def get_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        return user

    def get_profile(self, user_id: int):
        user = self.get_user(user_id)
        return {
            "id": user.id,
            "username": user.username,
            "isAdmin": bool(user.is_admin),
            "createdAt": user.created_at.isoformat() if user.created_at else None,
            "notes": decrypt_text(user.encrypted_notes) if user.encrypted_notes else None,
        }

    def save_notes(self, user_id: int, notes: str):
        with atomic(self.session):
            user = self.get_user(user_id)
            user.encrypted_notes = encrypt_text(notes)
        return "Notes saved successfully"

    def promote(self, user_id: int):
        with atomic(self.session):
            user = self.get_user(user_id)
            user.is_admin = True
        current_app.logger.info(f"[auth] user id={user_id} promoted to admin")
        return "User promoted to admin successfully"

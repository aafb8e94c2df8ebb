from library_api.models.user import User


class UserRepo:
    def __init__(self, session):
        self.session = session

    def get_by_username(self, username: str):
        return self.session.query(User).filter_by(username=username).first()

    def get_by_id(self, user_id: int):
        return self.session.get(User, user_id)

    def get_many(self, user_ids):
        if not user_ids:
            return []
        return self.session.query(User).filter(User.id.in_(list(user_ids))).all()

    def add(self, user: User):
        self.session.add(user)
        return user

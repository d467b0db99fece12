from flask_sqlalchemy import SQLAlchemy

# Bound to the application in app.create_app
db = SQLAlchemy()


class MerchantProfile(db.Model):
    __tablename__ = "MerchantProfile"
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column("firstName", db.String(255), nullable=False)
    last_name = db.Column("lastName", db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    store_name = db.Column("storeName", db.String(255), nullable=False)
    created_at = db.Column("createdAt", db.DateTime, server_default=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "storeName": self.store_name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<MerchantProfile {self.id} {self.store_name!r}>"

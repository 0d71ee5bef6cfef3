from datetime import datetime
from cafe_app.extensions import db


class CafeSetting(db.Model):
    __tablename__ = "cafe_settings"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.String(255), nullable=False)
    updated_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

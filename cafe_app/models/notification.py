from datetime import datetime
from cafe_app.extensions import db


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    title_ar = db.Column(db.String(255), nullable=True)
    message = db.Column(db.Text, nullable=False)
    message_ar = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(50), nullable=False)
    priority = db.Column(db.String(20), nullable=False, default="medium")
    action_url = db.Column(db.String(255), nullable=True)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

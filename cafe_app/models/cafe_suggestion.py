from datetime import datetime
from cafe_app.extensions import db


class CafeSuggestion(db.Model):
    __tablename__ = "cafe_suggestions"

    id = db.Column(db.Integer, primary_key=True)
    suggestion_text = db.Column(db.String(200), nullable=False)
    suggested_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    author = db.relationship("User")


class CafeSuggestionUpvote(db.Model):
    __tablename__ = "cafe_suggestion_upvotes"

    suggestion_id = db.Column(
        db.Integer,
        db.ForeignKey("cafe_suggestions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
